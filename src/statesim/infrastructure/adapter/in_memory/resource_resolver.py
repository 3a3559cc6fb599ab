from collections.abc import Mapping

from statesim.application.port import Resource, ResourceResolver
from statesim.domain.exception import ResourceNotFoundError


class InMemoryResourceResolver(ResourceResolver):
    """Resolves resources from a caller-owned mapping of ids to callables."""

    def __init__(self, resources: Mapping[str, Resource] | None = None):
        """
        Initializes resolver with the caller's registry. The mapping is read, never modified.

        :param resources: Mapping of resource ids to callables
        :type resources: Mapping[str, Resource] | None
        """
        self._registry: Mapping[str, Resource] = resources if resources is not None else {}

    def resolve(self, resource_id: str) -> Resource:
        """
        Returns the callable registered under the given id.

        :param resource_id: The resource id to look up
        :type resource_id: str
        :returns: The registered callable
        :rtype: Resource
        :raises ResourceNotFoundError: If no resource is registered for the id
        """
        try:
            return self._registry[resource_id]
        except KeyError:
            raise ResourceNotFoundError(resource_id) from None
