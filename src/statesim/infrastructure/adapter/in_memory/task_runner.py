import inspect
from typing import Any

from statesim.application.port import Resource, TaskRunner
from statesim.domain.exception import AsyncResourceError


class InMemoryTaskRunner(TaskRunner):
    def run(self, resource_id: str, resource: Resource, payload: Any) -> Any:
        """
        Call a resource in-process.

        :param resource_id: The id the resource was resolved from
        :type resource_id: str
        :param resource: The callable to invoke
        :type resource: Resource
        :param payload: The Task state's effective input
        :type payload: Any
        :returns: The resource output
        :rtype: Any
        :raises AsyncResourceError: If the resource returns an awaitable
        """
        output = resource(payload)
        if inspect.isawaitable(output):
            if inspect.iscoroutine(output):
                output.close()
            raise AsyncResourceError(resource_id)
        return output

    async def run_async(self, resource_id: str, resource: Resource, payload: Any) -> Any:
        """
        Call a resource in-process and await its output if it is awaitable.

        :param resource_id: The id the resource was resolved from
        :type resource_id: str
        :param resource: The callable to invoke
        :type resource: Resource
        :param payload: The Task state's effective input
        :type payload: Any
        :returns: The resource output
        :rtype: Any
        """
        output = resource(payload)
        if inspect.isawaitable(output):
            output = await output
        return output
