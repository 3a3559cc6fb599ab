"""
Integration tests for the entire statesim interpreter.

This module runs definitions end-to-end through the public StateMachine
against in-memory resources.
"""

import asyncio
import copy

import pytest

from statesim import (
    AsyncResourceError,
    InvalidStateTypeError,
    MissingStartStateError,
    NonTerminalWithoutNextError,
    ResourceNotFoundError,
    RunStateResult,
    StateMachine,
    StateType,
    UnsupportedStateTypeError,
)

ADD = "arn:aws:lambda:us-east-1:123456789012:function:Add"
DOUBLE = "arn:aws:lambda:us-east-1:123456789012:function:Double"

RESOURCES = {
    ADD: lambda numbers: numbers["val1"] + numbers["val2"],
    DOUBLE: lambda n: 2 * n,
}


def single_state(state: dict) -> dict:
    return {"StartAt": "Start", "States": {"Target": state}}


class TestRun:
    """Integration test cases for whole-graph runs."""

    def test_missing_start_at(self):
        """Test run fails when StartAt does not exist."""
        machine = StateMachine({"States": {"Done": {"Type": "Succeed"}}}, {})

        with pytest.raises(MissingStartStateError, match="StartAt does not exist"):
            machine.run({})

    @pytest.mark.parametrize("document", [{}, {"a": 1}, [], None])
    def test_missing_start_at_regardless_of_input(self, document):
        """Test the missing StartAt error does not depend on the input."""
        machine = StateMachine({"States": {}}, {})

        with pytest.raises(MissingStartStateError):
            machine.run(document)

    def test_task_fills_result_path(self):
        """Test the resource receives the InputPath subset and its output lands at ResultPath."""
        definition = {
            "StartAt": "Add",
            "States": {
                "Add": {
                    "Type": "Task",
                    "Resource": ADD,
                    "InputPath": "$.numbers",
                    "ResultPath": "$.sum",
                    "End": True,
                }
            },
        }
        document = {"title": "Numbers to add", "numbers": {"val1": 3, "val2": 4}}
        original = copy.deepcopy(document)

        result = StateMachine(definition, RESOURCES).run(document)

        assert result == RunStateResult(
            {"title": "Numbers to add", "numbers": {"val1": 3, "val2": 4}, "sum": 7},
            StateType.TASK,
            None,
            True,
        )
        assert document == original

    def test_invalid_type(self):
        """Test an unknown Type fails the run, naming the type."""
        machine = StateMachine({"StartAt": "Done", "States": {"Done": {"Type": "UnknownType"}}}, {})

        with pytest.raises(InvalidStateTypeError, match="Invalid Type: UnknownType"):
            machine.run({})

    def test_same_task_called_twice(self):
        """Test a graph may invoke the same resource from two states."""
        calls = []

        def double(n):
            calls.append(n)
            return 2 * n

        definition = {
            "StartAt": "First",
            "States": {
                "First": {"Type": "Task", "Resource": DOUBLE, "InputPath": "$.n", "ResultPath": "$.n", "Next": "Second"},
                "Second": {"Type": "Task", "Resource": DOUBLE, "InputPath": "$.n", "ResultPath": "$.n", "Next": "Done"},
                "Done": {"Type": "Succeed"},
            },
        }

        result = StateMachine(definition, {DOUBLE: double}).run({"n": 3})

        assert result.data == {"n": 12}
        assert result.state_type == StateType.SUCCEED
        assert calls == [3, 6]

    def test_pipeline_of_task_and_pass(self):
        """Test data flows through Pass and Task states into a Fail state."""
        definition = {
            "Comment": "https://states-language.net/spec.html#data",
            "StartAt": "Seed",
            "States": {
                "Seed": {"Type": "Pass", "Input": {"val1": 10, "val2": 5}, "ResultPath": "$.numbers", "Next": "Add"},
                "Add": {"Type": "Task", "Resource": ADD, "InputPath": "$.numbers", "ResultPath": "$.sum", "Next": "Double"},
                "Double": {"Type": "Task", "Resource": DOUBLE, "InputPath": "$.sum", "ResultPath": "$.total", "Next": "Stop"},
                "Stop": {"Type": "Fail", "Error": "Done", "Cause": "pipeline finished"},
            },
        }

        result = StateMachine(definition, RESOURCES).run({"title": "t"})

        assert result == RunStateResult(
            {"title": "t", "numbers": {"val1": 10, "val2": 5}, "sum": 15, "total": 30},
            StateType.FAIL,
            None,
            True,
        )

    def test_resource_not_found_aborts(self):
        """Test a missing resource aborts the run."""
        definition = {
            "StartAt": "Add",
            "States": {"Add": {"Type": "Task", "Resource": "missing", "ResultPath": "$.sum", "End": True}},
        }

        with pytest.raises(ResourceNotFoundError, match="missing"):
            StateMachine(definition, RESOURCES).run({})

    def test_resource_exception_aborts(self):
        """Test an exception from a resource propagates out of run."""

        def explode(_):
            raise ZeroDivisionError("division by zero")

        definition = {
            "StartAt": "Boom",
            "States": {
                "Boom": {"Type": "Task", "Resource": "boom", "ResultPath": "$.x", "Next": "Done"},
                "Done": {"Type": "Succeed"},
            },
        }

        with pytest.raises(ZeroDivisionError):
            StateMachine(definition, {"boom": explode}).run({})

    def test_unsupported_state_fails_fast(self):
        """Test a Choice state in the graph fails with a clear error."""
        definition = {
            "StartAt": "Pick",
            "States": {
                "Pick": {"Type": "Choice", "Choices": [{"Variable": "$.n", "NumericEquals": 1, "Next": "Done"}]},
                "Done": {"Type": "Succeed"},
            },
        }

        with pytest.raises(UnsupportedStateTypeError, match="Choice"):
            StateMachine(definition, {}).run({"n": 1})

    def test_async_resource_requires_run_async(self):
        """Test the synchronous run refuses an async resource."""

        async def add_later(numbers):
            return numbers["val1"] + numbers["val2"]

        definition = {
            "StartAt": "Add",
            "States": {"Add": {"Type": "Task", "Resource": ADD, "InputPath": "$.numbers", "ResultPath": "$.sum", "End": True}},
        }

        with pytest.raises(AsyncResourceError):
            StateMachine(definition, {ADD: add_later}).run({"numbers": {"val1": 3, "val2": 4}})

    def test_definition_changes_after_construction_are_ignored(self):
        """Test a run uses the definition as it was when the machine was built."""
        definition = {
            "StartAt": "P",
            "States": {"P": {"Type": "Pass", "Input": {"v": 1}, "ResultPath": "$.x", "End": True}},
        }
        machine = StateMachine(definition, {})

        definition["States"]["P"]["Input"]["v"] = 999

        assert machine.run({}).data == {"x": {"v": 1}}


class TestRunAsync:
    """Integration test cases for asynchronous runs."""

    @pytest.mark.asyncio
    async def test_run_async_with_async_resource(self):
        """Test the run awaits an async resource before merging and moving on."""
        order = []

        async def add_later(numbers):
            order.append("call")
            await asyncio.sleep(0)
            order.append("done")
            return numbers["val1"] + numbers["val2"]

        def check(total):
            order.append("next")
            return total > 5

        definition = {
            "StartAt": "Add",
            "States": {
                "Add": {"Type": "Task", "Resource": ADD, "InputPath": "$.numbers", "ResultPath": "$.sum", "Next": "Check"},
                "Check": {"Type": "Task", "Resource": "check", "InputPath": "$.sum", "ResultPath": "$.big", "End": True},
            },
        }
        machine = StateMachine(definition, {ADD: add_later, "check": check})

        result = await machine.run_async({"title": "Numbers to add", "numbers": {"val1": 3, "val2": 4}})

        assert result.data == {"title": "Numbers to add", "numbers": {"val1": 3, "val2": 4}, "sum": 7, "big": True}
        assert order == ["call", "done", "next"]

    @pytest.mark.asyncio
    async def test_run_state_async(self):
        """Test a single async Task step."""

        async def double(n):
            return 2 * n

        machine = StateMachine(
            single_state({"Type": "Task", "Resource": DOUBLE, "InputPath": "$.n", "ResultPath": "$.n", "Next": "N"}),
            {DOUBLE: double},
        )

        result = await machine.run_state_async("Target", {"n": 21})

        assert result == RunStateResult({"n": 42}, StateType.TASK, "N", False)


class TestRunState:
    """Integration test cases for single-state execution."""

    def test_end_marks_terminal(self):
        """Test End: true marks the state terminal."""
        machine = StateMachine(single_state({"Input": "a", "ResultPath": "$.a2", "Type": "Pass", "End": True}), {})

        result = machine.run_state("Target", {"a1": 123})

        assert result.is_terminal_state is True
        assert result.next_state_name is None

    def test_next_destination(self):
        """Test the Next field becomes the next state name."""
        machine = StateMachine(single_state({"Input": "a", "ResultPath": "$.a2", "Type": "Pass", "Next": "NextState"}), {})

        result = machine.run_state("Target", {"a1": 123})

        assert result.next_state_name == "NextState"
        assert result.is_terminal_state is False

    def test_neither_next_nor_end(self):
        """Test a state without Next or End fails."""
        machine = StateMachine(single_state({"Input": "a", "ResultPath": "$.a2", "Type": "Pass"}), {})

        with pytest.raises(NonTerminalWithoutNextError):
            machine.run_state("Target", {"a1": 123})

    @pytest.mark.parametrize("kind", ["Succeed", "Fail"])
    def test_terminal_kinds_leave_data_unchanged(self, kind):
        """Test Succeed and Fail return the document as-is."""
        machine = StateMachine(single_state({"Type": kind}), {})

        assert machine.run_state("Target", {"sum": 7}) == RunStateResult({"sum": 7}, kind, None, True)

    @pytest.mark.parametrize("kind", ["Succeed", "Fail"])
    def test_terminal_kinds_with_end(self, kind):
        """Test Succeed and Fail accept End: true."""
        machine = StateMachine(single_state({"Type": kind, "End": True}), {})

        assert machine.run_state("Target", {"sum": 7}) == RunStateResult({"sum": 7}, kind, None, True)

    def test_invalid_type_names_type(self):
        """Test run_state rejects an unknown Type."""
        machine = StateMachine(single_state({"Type": "Sleep", "Next": "X"}), {})

        with pytest.raises(InvalidStateTypeError, match="Invalid Type: Sleep"):
            machine.run_state("Target", {})

    def test_pass_with_literal_input(self):
        """Test Pass writes its literal Input at ResultPath."""
        machine = StateMachine(single_state({"Input": "a", "ResultPath": "$.a2", "Type": "Pass", "Next": "NextState"}), {})

        assert machine.run_state("Target", {"a1": 123}) == RunStateResult(
            {"a1": 123, "a2": "a"}, StateType.PASS, "NextState", False
        )

    def test_pass_with_null_input_path(self):
        """Test Pass with InputPath null writes an empty object."""
        machine = StateMachine(
            single_state({"InputPath": None, "ResultPath": "$.a2", "Type": "Pass", "Next": "NextState"}), {}
        )

        assert machine.run_state("Target", {"a1": 123}) == RunStateResult(
            {"a1": 123, "a2": {}}, StateType.PASS, "NextState", False
        )

    def test_pass_with_absent_input_path(self):
        """Test Pass without InputPath copies the whole document."""
        machine = StateMachine(single_state({"ResultPath": "$.a2", "Type": "Pass", "Next": "NextState"}), {})

        assert machine.run_state("Target", {"a1": 123}).data == {"a1": 123, "a2": {"a1": 123}}

    def test_pass_with_input_path(self):
        """Test Pass copies the value selected by InputPath."""
        machine = StateMachine(
            single_state({"InputPath": "$.a1", "ResultPath": "$.a2", "Type": "Pass", "Next": "NextState"}), {}
        )

        assert machine.run_state("Target", {"a1": 123}) == RunStateResult(
            {"a1": 123, "a2": 123}, StateType.PASS, "NextState", False
        )

    def test_pass_with_deep_paths(self):
        """Test deep InputPath and ResultPath are followed."""
        machine = StateMachine(
            single_state({"InputPath": "$.a.b2.c1", "ResultPath": "$.a.b3.c2", "Type": "Pass", "Next": "NextState"}),
            {},
        )
        document = {"a": {"b1": "a-b1", "b2": {"c1": "a-b2-c1"}, "b3": {"c1": "a-b3-c1"}}}

        assert machine.run_state("Target", document) == RunStateResult(
            {"a": {"b1": "a-b1", "b2": {"c1": "a-b2-c1"}, "b3": {"c1": "a-b3-c1", "c2": "a-b2-c1"}}},
            StateType.PASS,
            "NextState",
            False,
        )

    def test_task_with_input_path(self):
        """Test Task passes the InputPath subset to the resource."""
        machine = StateMachine(
            single_state(
                {"InputPath": "$.numbers", "Resource": ADD, "ResultPath": "$.sum", "Type": "Task", "Next": "NextState"}
            ),
            RESOURCES,
        )

        assert machine.run_state("Target", {"numbers": {"val1": 3, "val2": 4}}) == RunStateResult(
            {"numbers": {"val1": 3, "val2": 4}, "sum": 7}, StateType.TASK, "NextState", False
        )

    def test_task_with_deep_input_path(self):
        """Test Task follows a deep InputPath."""
        machine = StateMachine(
            single_state(
                {"InputPath": "$.a.b3.c2", "Resource": ADD, "ResultPath": "$.sum", "Type": "Task", "Next": "NextState"}
            ),
            RESOURCES,
        )

        assert machine.run_state("Target", {"a": {"b3": {"c2": {"val1": 3, "val2": 4}}}}) == RunStateResult(
            {"a": {"b3": {"c2": {"val1": 3, "val2": 4}}}, "sum": 7}, StateType.TASK, "NextState", False
        )

    def test_task_without_input_path(self):
        """Test Task without InputPath passes the whole document."""
        machine = StateMachine(
            single_state({"Resource": ADD, "ResultPath": "$.sum", "Type": "Task", "End": True}), RESOURCES
        )

        assert machine.run_state("Target", {"val1": 1, "val2": 2}).data == {"val1": 1, "val2": 2, "sum": 3}

    def test_task_with_input(self):
        """Test Task passes a literal Input to the resource."""
        machine = StateMachine(
            single_state({"Input": 21, "Resource": DOUBLE, "ResultPath": "$.n", "Type": "Task", "End": True}), RESOURCES
        )

        assert machine.run_state("Target", {}).data == {"n": 42}
