from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any

from statesim.domain.entity import Definition, RunStateResult, StateTypes

Resource = Callable[[Any], Any]


class ResourceResolver(ABC):
    """Abstract base class defining resource lookup."""

    @abstractmethod
    def resolve(self, resource_id: str) -> Resource:
        """
        Returns the callable registered under a resource id.

        :param resource_id: The Task state's ``Resource`` value
        :type resource_id: str
        :returns: The registered callable
        :rtype: Resource
        :raises ResourceNotFoundError: If nothing is registered under the id
        """
        ...


class TaskRunner(ABC):
    """Abstract interface for invoking a resource."""

    @abstractmethod
    def run(self, resource_id: str, resource: Resource, payload: Any) -> Any:
        """
        Invoke a resource and return its output without suspending.

        :param resource_id: The id the resource was resolved from
        :type resource_id: str
        :param resource: The callable to invoke
        :type resource: Resource
        :param payload: The Task state's effective input
        :type payload: Any
        :returns: The resource output
        :rtype: Any
        """

    @abstractmethod
    async def run_async(self, resource_id: str, resource: Resource, payload: Any) -> Any:
        """
        Invoke a resource, awaiting its output when it is awaitable.

        :param resource_id: The id the resource was resolved from
        :type resource_id: str
        :param resource: The callable to invoke
        :type resource: Resource
        :param payload: The Task state's effective input
        :type payload: Any
        :returns: The resource output
        :rtype: Any
        """


class StateExecutor(ABC):
    """Abstract executor interface for running one state against a document."""

    @abstractmethod
    def execute(self, name: str, state: StateTypes, document: Any) -> RunStateResult:
        """
        Execute a state and return its result.

        :param name: The state name
        :type name: str
        :param state: The decoded state
        :type state: StateTypes
        :param document: The state's input document
        :type document: Any
        :returns: The outcome of the state
        :rtype: RunStateResult
        """
        ...

    async def execute_async(self, name: str, state: StateTypes, document: Any) -> RunStateResult:
        """Execute a state, suspending where it calls out. Defaults to :meth:`execute`."""
        return self.execute(name, state, document)


class ExecutorFactory(ABC):
    """Abstract factory for creating state executors."""

    @abstractmethod
    def get_executor(self, state: StateTypes) -> StateExecutor:
        """
        Get an executor for the given state.

        :param state: The state to get an executor for
        :type state: StateTypes
        :returns: An executor capable of executing the state
        :rtype: StateExecutor
        """


class StateMachineEngine(ABC):
    """Abstract base class defining the state machine engine interface."""

    @abstractmethod
    def run(self, definition: Definition, document: Any) -> RunStateResult:
        """
        Runs a definition from its start state to a terminal state.

        :param definition: The definition to execute
        :type definition: Definition
        :param document: The input document
        :type document: Any
        :returns: The result of the terminal state
        :rtype: RunStateResult
        """
        ...

    @abstractmethod
    def run_state(self, definition: Definition, name: str, document: Any) -> RunStateResult:
        """
        Runs a single named state.

        :param definition: The definition holding the state
        :type definition: Definition
        :param name: The state name
        :type name: str
        :param document: The state's input document
        :type document: Any
        :returns: The outcome of the state
        :rtype: RunStateResult
        """
        ...

    @abstractmethod
    async def run_async(self, definition: Definition, document: Any) -> RunStateResult:
        """Asynchronous counterpart of :meth:`run`."""
        ...

    @abstractmethod
    async def run_state_async(self, definition: Definition, name: str, document: Any) -> RunStateResult:
        """Asynchronous counterpart of :meth:`run_state`."""
        ...
