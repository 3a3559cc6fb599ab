import logging
from typing import Any

import msgspec

from statesim.domain.entity import Definition, RunStateResult, StateTypes
from statesim.domain.exception import DefinitionError, MissingStartStateError, NonTerminalWithoutNextError

logger = logging.getLogger(__name__)


def load_definition(data: dict | str | bytes | Definition) -> Definition:
    """
    Decodes a definition from a Python dictionary or JSON text.

    A dictionary is copied while decoding, so later changes to it do not
    reach the returned Definition.

    :param data: The definition as a dictionary, JSON text, or Definition instance
    :type data: dict | str | bytes | Definition
    :returns: The decoded Definition
    :rtype: Definition
    :raises DefinitionError: If the definition does not decode
    """
    if isinstance(data, Definition):
        return data
    try:
        if isinstance(data, (str, bytes)):
            return msgspec.json.decode(data, type=Definition)
        return msgspec.convert(msgspec.to_builtins(data), type=Definition)
    except (msgspec.ValidationError, msgspec.DecodeError, TypeError) as e:
        raise DefinitionError(f"Invalid definition: {e}") from e


def resolve_start_state(definition: Definition) -> str:
    """
    Returns the name of the state a run begins with.

    :param definition: The definition to run
    :type definition: Definition
    :returns: The ``StartAt`` state name
    :rtype: str
    :raises MissingStartStateError: If ``StartAt`` is absent or names no declared state
    """
    if not definition.start_at:
        raise MissingStartStateError()
    if definition.start_at not in definition.states:
        raise MissingStartStateError(definition.start_at)
    return definition.start_at


def conclude_state(name: str, state: StateTypes, data: Any) -> RunStateResult:
    """
    Decides where control goes after a state has computed its output.

    Runs after every kind's computation: a terminal state ends the run,
    any other state must name its successor in ``Next``.

    :param name: The state name
    :type name: str
    :param state: The executed state
    :type state: StateTypes
    :param data: The state's output document
    :type data: Any
    :returns: The state's result
    :rtype: RunStateResult
    :raises NonTerminalWithoutNextError: If the state is not terminal and has no ``Next``
    """
    if state.is_terminal:
        logger.debug("State '%s' is terminal", name)
        return RunStateResult(data=data, state_type=state.state_type, next_state_name=None, is_terminal_state=True)

    next_state = getattr(state, "next", None)
    if not next_state:
        raise NonTerminalWithoutNextError(name)
    logger.debug("State '%s' transitions to '%s'", name, next_state)
    return RunStateResult(data=data, state_type=state.state_type, next_state_name=next_state, is_terminal_state=False)
