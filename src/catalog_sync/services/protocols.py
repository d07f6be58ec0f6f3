"""
Interfaces of the collaborators the reconciler depends on.

The catalog client and the alias cache are provided by the caller; any
object with these methods can be injected.
"""

from typing import Protocol

from ..models.catalog import (
    CatalogService,
    Lifecycle,
    Repository,
    ServiceRepository,
    Tag,
    Team,
    Tier,
    Tool,
)
from ..models.requests import (
    AliasCreateInput,
    ServiceCreateInput,
    ServiceRepositoryCreateInput,
    ServiceRepositoryUpdateInput,
    ServiceUpdateInput,
    TagAssignInput,
    TagCreateInput,
    ToolCreateInput,
)


class CatalogClient(Protocol):
    """
    Async client for the service catalog API.

    Implementations raise an exception (usually CatalogAPIError) when a
    call fails. Lookups may return None or raise CatalogNotFoundError when
    nothing matches.
    """

    async def get_service_with_alias(self, alias: str) -> CatalogService | None: ...

    async def create_service(self, input: ServiceCreateInput) -> CatalogService: ...

    async def update_service(self, input: ServiceUpdateInput) -> CatalogService: ...

    async def create_alias(self, input: AliasCreateInput) -> list[str]: ...

    async def assign_tags(self, input: TagAssignInput) -> list[Tag]: ...

    async def create_tag(self, input: TagCreateInput) -> Tag: ...

    async def create_tool(self, input: ToolCreateInput) -> Tool: ...

    async def get_repository_with_alias(self, alias: str) -> Repository | None: ...

    async def create_service_repository(
        self, input: ServiceRepositoryCreateInput
    ) -> ServiceRepository: ...

    async def update_service_repository(
        self, input: ServiceRepositoryUpdateInput
    ) -> ServiceRepository: ...


class AliasCache(Protocol):
    """Resolves tier, lifecycle and team aliases known to the catalog."""

    def try_get_tier(self, alias: str) -> Tier | None: ...

    def try_get_lifecycle(self, alias: str) -> Lifecycle | None: ...

    def try_get_team(self, alias: str) -> Team | None: ...
