import copy
import logging
from typing import Any

from msgspec import UNSET

from statesim.application.port import ResourceResolver, StateExecutor, TaskRunner
from statesim.application.service import conclude_state
from statesim.domain.entity import FailState, PassState, StateTypes, SucceedState, TaskState
from statesim.domain.exception import UnsupportedStateTypeError
from statesim.domain.service import merge_result, select_input, select_output

logger = logging.getLogger(__name__)


class TaskExecutor(StateExecutor):
    """Executes a Task state by resolving and invoking its resource."""

    def __init__(self, resolver: ResourceResolver, task_runner: TaskRunner):
        """
        Initializes with a resource resolver and a task runner.

        :param resolver: Looks up the callable for the state's ``Resource``
        :type resolver: ResourceResolver
        :param task_runner: Invokes the resolved callable
        :type task_runner: TaskRunner
        """
        self.resolver = resolver
        self.task_runner = task_runner

    def execute(self, name: str, state: TaskState, document: Any):
        """Invokes the resource synchronously and merges its output into the document."""
        payload = self._payload(state, document)
        resource = self.resolver.resolve(state.resource)
        logger.debug("Task '%s' invoking resource '%s'", name, state.resource)
        output = self.task_runner.run(state.resource, resource, payload)
        return self._complete(name, state, document, output)

    async def execute_async(self, name: str, state: TaskState, document: Any):
        """Invokes the resource, awaiting it when needed, then merges its output into the document."""
        payload = self._payload(state, document)
        resource = self.resolver.resolve(state.resource)
        logger.debug("Task '%s' invoking resource '%s'", name, state.resource)
        output = await self.task_runner.run_async(state.resource, resource, payload)
        return self._complete(name, state, document, output)

    @staticmethod
    def _payload(state: TaskState, document: Any) -> Any:
        if state.input is not UNSET:
            return copy.deepcopy(state.input)
        return select_input(document, state.input_path)

    @staticmethod
    def _complete(name: str, state: TaskState, document: Any, output: Any):
        data = merge_result(document, state.result_path, output)
        return conclude_state(name, state, select_output(data, state.output_path))


class PassExecutor(StateExecutor):
    """Executes a Pass state: its input, or its literal ``Input``, becomes its result."""

    def execute(self, name: str, state: PassState, document: Any):
        if state.input is not UNSET:
            output = copy.deepcopy(state.input)
        else:
            output = select_input(document, state.input_path)
        data = merge_result(document, state.result_path, output)
        return conclude_state(name, state, select_output(data, state.output_path))


class SucceedExecutor(StateExecutor):
    """Ends the run successfully with the document unchanged."""

    def execute(self, name: str, state: SucceedState, document: Any):
        return conclude_state(name, state, document)


class FailExecutor(StateExecutor):
    """Ends the run with the document unchanged. ``Error`` and ``Cause`` are carried on the state only."""

    def execute(self, name: str, state: FailState, document: Any):
        logger.debug("Fail state '%s' reached (error=%s, cause=%s)", name, state.error, state.cause)
        return conclude_state(name, state, document)


class UnsupportedStateExecutor(StateExecutor):
    """Fails fast for kinds the interpreter recognises but does not run."""

    def execute(self, name: str, state: StateTypes, document: Any):
        raise UnsupportedStateTypeError(state.state_type.value, name)
