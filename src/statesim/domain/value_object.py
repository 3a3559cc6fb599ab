from dataclasses import dataclass
from enum import Enum


@dataclass
class ExecutionOptions:
    max_transitions: int | None = None


class StateType(str, Enum):
    TASK = "Task"
    PASS = "Pass"
    SUCCEED = "Succeed"
    FAIL = "Fail"
    CHOICE = "Choice"
    PARALLEL = "Parallel"
    WAIT = "Wait"
    MAP = "Map"

    @classmethod
    def is_known(cls, value: object) -> bool:
        return isinstance(value, str) and value in cls._value2member_map_
