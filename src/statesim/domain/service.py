from typing import Any

import msgspec
from msgspec import UNSET, UnsetType

from statesim.domain.entity import Definition, StateTypes
from statesim.domain.exception import DefinitionError, InvalidStateTypeError, StateNotFoundError
from statesim.domain.path import read, write
from statesim.domain.value_object import StateType


def select_input(document: Any, input_path: str | None | UnsetType = UNSET) -> Any:
    """
    Applies the InputPath rule to a document.

    An absent path selects the whole document, ``None`` selects an empty
    object, and a string path selects the value it reads.

    :param document: The state's input document
    :type document: Any
    :param input_path: The declared InputPath, or UNSET when the key is absent
    :type input_path: str | None | UnsetType
    :returns: The selected input
    :rtype: Any
    """
    if input_path is UNSET:
        return document
    if input_path is None:
        return {}
    return read(document, input_path)


def merge_result(document: Any, result_path: str | None, result: Any) -> Any:
    """
    Writes a state's result into a copy of its input document.

    A ``None`` result path discards the result and returns the document unchanged.

    :param document: The state's input document
    :type document: Any
    :param result_path: The declared ResultPath
    :type result_path: str | None
    :param result: The computed result
    :type result: Any
    :returns: The merged document
    :rtype: Any
    """
    if result_path is None:
        return document
    return write(document, result_path, result)


def select_output(document: Any, output_path: str | None | UnsetType = UNSET) -> Any:
    """Applies the OutputPath rule, which follows the same three-way rule as InputPath."""
    return select_input(document, output_path)


def load_state(definition: Definition, name: str) -> StateTypes:
    """
    Decodes the named state of a definition.

    :param definition: The definition holding the state
    :type definition: Definition
    :param name: The state name
    :type name: str
    :returns: The decoded state
    :rtype: StateTypes
    :raises StateNotFoundError: If no state has that name
    :raises InvalidStateTypeError: If the state's Type is not a known kind
    :raises DefinitionError: If the state is otherwise malformed
    """
    try:
        raw = definition.states[name]
    except KeyError:
        raise StateNotFoundError(name) from None

    state_type = raw.get("Type")
    if not StateType.is_known(state_type):
        raise InvalidStateTypeError(state_type, name)

    try:
        return msgspec.convert(raw, type=StateTypes)
    except msgspec.ValidationError as e:
        raise DefinitionError(f"State '{name}' is invalid: {e}") from e
