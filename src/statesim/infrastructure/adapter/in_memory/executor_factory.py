from statesim.application.adapter import (
    FailExecutor,
    PassExecutor,
    SucceedExecutor,
    TaskExecutor,
    UnsupportedStateExecutor,
)
from statesim.application.port import ExecutorFactory, ResourceResolver, StateExecutor, TaskRunner
from statesim.domain.entity import (
    ChoiceState,
    FailState,
    MapState,
    ParallelState,
    PassState,
    State,
    SucceedState,
    TaskState,
    WaitState,
)


class InMemoryExecutorFactory(ExecutorFactory):
    def __init__(self, resolver: ResourceResolver, task_runner: TaskRunner):
        self.resolver = resolver
        self.task_runner = task_runner

    def get_executor(self, state: State) -> StateExecutor:
        """
        Get the appropriate executor for the given state kind.

        :param state: The state to get an executor for
        :type state: State
        :returns: The executor for the given state kind
        :rtype: StateExecutor
        :raises ValueError: If the state kind is unknown
        """
        if isinstance(state, TaskState):
            return TaskExecutor(self.resolver, self.task_runner)
        elif isinstance(state, PassState):
            return PassExecutor()
        elif isinstance(state, SucceedState):
            return SucceedExecutor()
        elif isinstance(state, FailState):
            return FailExecutor()
        elif isinstance(state, (ChoiceState, ParallelState, WaitState, MapState)):
            return UnsupportedStateExecutor()
        else:
            raise ValueError(f"Unknown state kind: {type(state)}")
