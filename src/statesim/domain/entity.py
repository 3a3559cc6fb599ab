from typing import Any, ClassVar

import msgspec
from msgspec import UNSET, UnsetType

from statesim.domain.exception import RunStateResultInvariantError
from statesim.domain.value_object import StateType


class State(
    msgspec.Struct,
    tag_field="Type",
    rename="pascal",
    frozen=True,
    kw_only=True,
    forbid_unknown_fields=True,
):
    """Base class for state kinds. Field names are decoded from their PascalCase keys."""

    state_type: ClassVar[StateType]

    comment: str | None = None

    @property
    def is_terminal(self) -> bool:
        return False


class TaskState(State, tag="Task", kw_only=True):
    """Invokes the resource registered under ``Resource`` and merges its output.

    ``InputPath`` and ``OutputPath`` are UNSET when absent, so that an explicit
    ``null`` stays distinguishable from a missing key. ``Input``, when present,
    is passed to the resource instead of the InputPath projection.
    """

    state_type: ClassVar[StateType] = StateType.TASK

    resource: str
    result_path: str | None
    input_path: str | None | UnsetType = UNSET
    input: Any = UNSET
    output_path: str | None | UnsetType = UNSET
    next: str | None = None
    end: bool = False

    @property
    def is_terminal(self) -> bool:
        return self.end


class PassState(State, tag="Pass", kw_only=True):
    """Passes its input (or the literal ``Input``) to ``ResultPath`` without any resource call."""

    state_type: ClassVar[StateType] = StateType.PASS

    result_path: str | None
    input_path: str | None | UnsetType = UNSET
    input: Any = UNSET
    output_path: str | None | UnsetType = UNSET
    next: str | None = None
    end: bool = False

    @property
    def is_terminal(self) -> bool:
        return self.end


class SucceedState(State, tag="Succeed", kw_only=True):
    state_type: ClassVar[StateType] = StateType.SUCCEED

    next: str | None = None
    end: bool = False

    @property
    def is_terminal(self) -> bool:
        return True


class FailState(State, tag="Fail", kw_only=True):
    state_type: ClassVar[StateType] = StateType.FAIL

    error: str | None = None
    cause: str | None = None
    next: str | None = None
    end: bool = False

    @property
    def is_terminal(self) -> bool:
        return True


# Recognised kinds without an interpreter. They decode loosely so that a
# definition using them still loads; executing one fails fast.


class ChoiceState(State, tag="Choice", kw_only=True, forbid_unknown_fields=False):
    state_type: ClassVar[StateType] = StateType.CHOICE

    choices: list[dict[str, Any]] = msgspec.field(default_factory=list)
    default: str | None = None


class ParallelState(State, tag="Parallel", kw_only=True, forbid_unknown_fields=False):
    state_type: ClassVar[StateType] = StateType.PARALLEL

    branches: list[dict[str, Any]] = msgspec.field(default_factory=list)
    next: str | None = None
    end: bool = False


class WaitState(State, tag="Wait", kw_only=True, forbid_unknown_fields=False):
    state_type: ClassVar[StateType] = StateType.WAIT

    next: str | None = None
    end: bool = False


class MapState(State, tag="Map", kw_only=True, forbid_unknown_fields=False):
    state_type: ClassVar[StateType] = StateType.MAP

    next: str | None = None
    end: bool = False


StateTypes = TaskState | PassState | SucceedState | FailState | ChoiceState | ParallelState | WaitState | MapState


class Definition(msgspec.Struct, rename="pascal", frozen=True, forbid_unknown_fields=True):
    """A workflow definition.

    States are kept as raw mappings and decoded one at a time when executed, so a
    malformed state only fails the run that reaches it.
    """

    states: dict[str, dict[str, Any]] = msgspec.field(default_factory=dict)
    start_at: str | None = None
    comment: str | None = None
    version: str | None = None
    timeout_seconds: int | None = None


class RunStateResult(msgspec.Struct, frozen=True):
    """Outcome of executing one state."""

    data: Any
    state_type: StateType
    next_state_name: str | None
    is_terminal_state: bool

    def __post_init__(self):
        if self.next_state_name is None and not self.is_terminal_state:
            raise RunStateResultInvariantError("next_state_name must be non-null when the state is non-terminal")

    def to_dict(self):
        """Convert the RunStateResult to a dictionary."""
        return msgspec.to_builtins(self)

    def to_json(self) -> str:
        """Convert the RunStateResult to a JSON string."""
        return msgspec.json.encode(self).decode()
