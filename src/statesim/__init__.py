"""
statesim - Local States Language Interpreter

Runs JSON workflow definitions (Task, Pass, Succeed and Fail states) against
in-memory callables standing in for remote resources, reproducing the state
transitions and data flow of the real execution engine without network calls.
"""

from statesim.client import StateMachine
from statesim.domain.entity import Definition, RunStateResult
from statesim.domain.exception import (
    AsyncResourceError,
    DefinitionError,
    InvalidPathError,
    InvalidStateTypeError,
    MaxTransitionsExceededError,
    MissingStartStateError,
    NonTerminalWithoutNextError,
    ResourceNotFoundError,
    RunStateResultInvariantError,
    StateMachineError,
    StateNotFoundError,
    UnsupportedStateTypeError,
)
from statesim.domain.value_object import ExecutionOptions, StateType

__all__ = [
    "StateMachine",
    "Definition",
    "RunStateResult",
    "ExecutionOptions",
    "StateType",
    "StateMachineError",
    "DefinitionError",
    "MissingStartStateError",
    "InvalidStateTypeError",
    "StateNotFoundError",
    "InvalidPathError",
    "NonTerminalWithoutNextError",
    "UnsupportedStateTypeError",
    "ResourceNotFoundError",
    "AsyncResourceError",
    "RunStateResultInvariantError",
    "MaxTransitionsExceededError",
]
