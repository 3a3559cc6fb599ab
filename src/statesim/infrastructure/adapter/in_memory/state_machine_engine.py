import logging
from collections.abc import Mapping
from typing import Any

from statesim.application.port import ExecutorFactory, Resource, StateMachineEngine
from statesim.application.service import resolve_start_state
from statesim.domain.entity import Definition, RunStateResult
from statesim.domain.exception import MaxTransitionsExceededError
from statesim.domain.service import load_state
from statesim.domain.value_object import ExecutionOptions
from statesim.infrastructure.adapter.in_memory.executor_factory import InMemoryExecutorFactory
from statesim.infrastructure.adapter.in_memory.resource_resolver import InMemoryResourceResolver
from statesim.infrastructure.adapter.in_memory.task_runner import InMemoryTaskRunner

logger = logging.getLogger(__name__)


class InMemoryStateMachineEngine(StateMachineEngine):
    """State machine engine that walks a definition in-process, one state at a time."""

    def __init__(self, executor_factory: ExecutorFactory, execution_options: ExecutionOptions | None = None):
        """
        Initializes with an executor factory and optional execution options.

        :param executor_factory: Factory for creating state executors
        :type executor_factory: ExecutorFactory
        :param execution_options: Run limits; defaults to no limits
        :type execution_options: ExecutionOptions | None
        """
        self.executor_factory = executor_factory
        self.execution_options = execution_options if execution_options is not None else ExecutionOptions()

    def run_state(self, definition: Definition, name: str, document: Any) -> RunStateResult:
        """
        Decodes and executes the named state.

        :param definition: The definition holding the state
        :type definition: Definition
        :param name: The state name
        :type name: str
        :param document: The state's input document
        :type document: Any
        :returns: The outcome of the state
        :rtype: RunStateResult
        """
        state = load_state(definition, name)
        logger.debug("Entering %s state '%s'", state.state_type.value, name)
        return self.executor_factory.get_executor(state).execute(name, state, document)

    async def run_state_async(self, definition: Definition, name: str, document: Any) -> RunStateResult:
        state = load_state(definition, name)
        logger.debug("Entering %s state '%s'", state.state_type.value, name)
        return await self.executor_factory.get_executor(state).execute_async(name, state, document)

    def run(self, definition: Definition, document: Any) -> RunStateResult:
        """
        Executes states from ``StartAt`` until one is terminal.

        There is no cycle detection unless ``max_transitions`` is set.

        :param definition: The definition to execute
        :type definition: Definition
        :param document: The input document
        :type document: Any
        :returns: The result of the terminal state
        :rtype: RunStateResult
        """
        current = resolve_start_state(definition)
        transitions = 0
        while True:
            result = self.run_state(definition, current, document)
            if result.is_terminal_state:
                return result
            transitions = self._count_transition(transitions, current)
            current, document = result.next_state_name, result.data

    async def run_async(self, definition: Definition, document: Any) -> RunStateResult:
        current = resolve_start_state(definition)
        transitions = 0
        while True:
            result = await self.run_state_async(definition, current, document)
            if result.is_terminal_state:
                return result
            transitions = self._count_transition(transitions, current)
            current, document = result.next_state_name, result.data

    def _count_transition(self, transitions: int, state_name: str) -> int:
        transitions += 1
        limit = self.execution_options.max_transitions
        if limit is not None and transitions > limit:
            raise MaxTransitionsExceededError(limit, state_name)
        return transitions


def create(
    resources: Mapping[str, Resource] | None = None,
    execution_options: ExecutionOptions | None = None,
) -> InMemoryStateMachineEngine:
    """
    Creates an InMemoryStateMachineEngine over the given resources.

    :param resources: Mapping of resource ids to callables
    :type resources: Mapping[str, Resource] | None
    :param execution_options: Run limits
    :type execution_options: ExecutionOptions | None
    :returns: Configured engine
    :rtype: InMemoryStateMachineEngine
    """
    executor_factory = InMemoryExecutorFactory(
        resolver=InMemoryResourceResolver(resources),
        task_runner=InMemoryTaskRunner(),
    )
    return InMemoryStateMachineEngine(executor_factory=executor_factory, execution_options=execution_options)
