from collections.abc import Mapping
from typing import Any

from statesim.application.port import Resource, StateMachineEngine
from statesim.application.service import load_definition
from statesim.domain.entity import Definition, RunStateResult
from statesim.domain.value_object import ExecutionOptions
from statesim.infrastructure.adapter.in_memory.state_machine_engine import create as create_in_memory_engine


class StateMachine:
    """
    Runs a workflow definition against in-memory stand-ins for its resources.

    The StateMachine is the only thing users interact with. It owns the decoded
    definition and hands each run to an engine, which by default is the
    in-memory engine built over ``resources``.
    """

    def __init__(
        self,
        definition: dict | str | bytes | Definition,
        resources: Mapping[str, Resource] | None = None,
        execution_options: ExecutionOptions | None = None,
        engine: StateMachineEngine | None = None,
    ):
        """
        Decode the definition and set up the engine.

        :param definition: The workflow definition as a dictionary, JSON text, or Definition
        :type definition: dict | str | bytes | Definition
        :param resources: Mapping of ``Resource`` ids to callables, sync or async
        :type resources: Mapping[str, Resource] | None
        :param execution_options: Run limits for the default engine
        :type execution_options: ExecutionOptions | None
        :param engine: An engine to use instead of the default in-memory one
        :type engine: StateMachineEngine | None
        :raises DefinitionError: If the definition does not decode
        """
        self.definition = load_definition(definition)
        self._engine = engine if engine is not None else create_in_memory_engine(resources, execution_options)

    def run(self, document: Any) -> RunStateResult:
        """
        Execute the workflow from ``StartAt`` to a terminal state.

        :param document: The input document
        :type document: Any
        :returns: The terminal state's result; its ``data`` is the final document
        :rtype: RunStateResult
        :raises MissingStartStateError: If ``StartAt`` is absent or names no state
        """
        return self._engine.run(self.definition, document)

    def run_state(self, state_name: str, document: Any) -> RunStateResult:
        """
        Execute a single state.

        :param state_name: The state to execute
        :type state_name: str
        :param document: The state's input document
        :type document: Any
        :returns: The outcome of the state
        :rtype: RunStateResult
        """
        return self._engine.run_state(self.definition, state_name, document)

    async def run_async(self, document: Any) -> RunStateResult:
        """Execute the workflow, awaiting asynchronous resources."""
        return await self._engine.run_async(self.definition, document)

    async def run_state_async(self, state_name: str, document: Any) -> RunStateResult:
        """Execute a single state, awaiting its resource if it is asynchronous."""
        return await self._engine.run_state_async(self.definition, state_name, document)
