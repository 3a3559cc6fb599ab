"""
Errors raised while loading or executing a state machine.

Every error is fatal to the enclosing ``run``/``run_state`` call. Nothing here
is retried or recovered internally.
"""


class StateMachineError(Exception):
    """Base class for all statesim errors."""


class DefinitionError(StateMachineError, ValueError):
    """Raised when a definition or one of its states is malformed."""


class MissingStartStateError(DefinitionError):
    """Raised when ``StartAt`` is absent or names no declared state."""

    def __init__(self, start_at: str | None = None):
        if start_at is None:
            message = "StartAt does not exist"
        else:
            message = f"StartAt does not exist: state '{start_at}' is not declared"
        super().__init__(message)
        self.start_at = start_at


class InvalidStateTypeError(DefinitionError):
    """Raised when a state declares a ``Type`` outside the known kinds."""

    def __init__(self, state_type: object, state_name: str | None = None):
        super().__init__(f"Invalid Type: {state_type}")
        self.state_type = state_type
        self.state_name = state_name


class StateNotFoundError(DefinitionError):
    """Raised when a state name is not declared in ``States``."""

    def __init__(self, state_name: str):
        super().__init__(f"State '{state_name}' does not exist")
        self.state_name = state_name


class InvalidPathError(DefinitionError):
    """Raised for a malformed path or a write that cannot follow its path."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"Invalid path '{path}': {reason}")
        self.path = path


class NonTerminalWithoutNextError(StateMachineError):
    """Raised when a state is neither terminal nor declares ``Next``."""

    def __init__(self, state_name: str):
        super().__init__(f"State '{state_name}' is not terminal and declares no Next state")
        self.state_name = state_name


class UnsupportedStateTypeError(StateMachineError):
    """Raised when executing a recognised kind the interpreter does not implement."""

    def __init__(self, state_type: str, state_name: str):
        super().__init__(f"State '{state_name}': Type '{state_type}' is not supported")
        self.state_type = state_type
        self.state_name = state_name


class ResourceNotFoundError(StateMachineError, KeyError):
    """Raised when a Task references a resource id absent from the registry."""

    def __init__(self, resource_id: str):
        super().__init__(f"No resource registered for '{resource_id}'")
        self.resource_id = resource_id

    def __str__(self) -> str:
        return str(self.args[0])


class AsyncResourceError(StateMachineError, TypeError):
    """Raised when a synchronous run meets a resource that must be awaited."""

    def __init__(self, resource_id: str):
        super().__init__(f"Resource '{resource_id}' returned an awaitable; use run_async() or run_state_async()")
        self.resource_id = resource_id


class RunStateResultInvariantError(StateMachineError, ValueError):
    """Raised when a RunStateResult is non-terminal without a next state."""


class MaxTransitionsExceededError(StateMachineError):
    """Raised when a run takes more transitions than ``ExecutionOptions.max_transitions``."""

    def __init__(self, limit: int, state_name: str):
        super().__init__(f"Run exceeded {limit} state transitions (last state '{state_name}')")
        self.limit = limit
        self.state_name = state_name
