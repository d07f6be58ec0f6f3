"""Shared pytest fixtures for catalog-sync unit tests."""

import itertools
from collections.abc import Callable
from typing import Any

import pytest

from catalog_sync.errors import CatalogNotFoundError
from catalog_sync.models.catalog import (
    CatalogService,
    Lifecycle,
    Repository,
    ServiceRepository,
    Tag,
    Team,
    Tier,
    Tool,
)
from catalog_sync.models.registration import ServiceRegistration
from catalog_sync.models.requests import (
    AliasCreateInput,
    ServiceCreateInput,
    ServiceRepositoryCreateInput,
    ServiceRepositoryUpdateInput,
    ServiceUpdateInput,
    TagAssignInput,
    TagCreateInput,
    ToolCreateInput,
)
from catalog_sync.services.service_reconciler import ServiceReconciler
from catalog_sync.settings import Settings


class FakeCatalogClient:
    """In-memory catalog that records every call.

    Reads return deep copies so the reconciler never sees its own writes
    until it reads again, like a real remote catalog.
    """

    def __init__(self) -> None:
        self.services: dict[str, CatalogService] = {}
        self.repositories: dict[str, Repository] = {}
        self.calls: list[tuple[str, Any]] = []
        self._failures: dict[str, tuple[Exception, Callable[[Any], bool] | None]] = {}
        self._ids = itertools.count(1)

    # Test helpers

    def add_service(self, service: CatalogService) -> CatalogService:
        if service.id is None:
            service.id = self._next_id("svc")
        self.services[service.id] = service
        return service

    def add_repository(self, repository: Repository) -> Repository:
        self.repositories[repository.id] = repository
        return repository

    def fail(
        self,
        method: str,
        error: Exception,
        when: Callable[[Any], bool] | None = None,
    ) -> None:
        """Make calls to method raise error, optionally only when the predicate matches."""
        self._failures[method] = (error, when)

    def calls_to(self, method: str) -> list[Any]:
        return [payload for name, payload in self.calls if name == method]

    @property
    def write_calls(self) -> list[tuple[str, Any]]:
        return [
            (name, payload)
            for name, payload in self.calls
            if not name.startswith("get_")
        ]

    def _next_id(self, prefix: str) -> str:
        return f"{prefix}-{next(self._ids)}"

    def _record(self, method: str, payload: Any) -> None:
        self.calls.append((method, payload))
        failure = self._failures.get(method)
        if failure is not None:
            error, when = failure
            if when is None or when(payload):
                raise error

    # CatalogClient

    async def get_service_with_alias(self, alias: str) -> CatalogService | None:
        self._record("get_service_with_alias", alias)
        for service in self.services.values():
            if service.has_alias(alias):
                return service.model_copy(deep=True)
        raise CatalogNotFoundError("Service", alias)

    async def create_service(self, input: ServiceCreateInput) -> CatalogService:
        self._record("create_service", input)
        service = self.add_service(
            CatalogService(
                name=input.name,
                product=input.product,
                description=input.description,
                language=input.language,
                framework=input.framework,
                tier=input.tier,
                lifecycle=input.lifecycle,
                owner=input.owner,
            )
        )
        return service.model_copy(deep=True)

    async def update_service(self, input: ServiceUpdateInput) -> CatalogService:
        self._record("update_service", input)
        service = self.services[input.id]
        changes = input.model_dump(exclude_none=True, exclude={"id"})
        updated = service.model_copy(update=changes, deep=True)
        self.services[input.id] = updated
        return updated.model_copy(deep=True)

    async def create_alias(self, input: AliasCreateInput) -> list[str]:
        self._record("create_alias", input)
        service = self.services[input.owner_id]
        service.aliases.append(input.alias)
        return list(service.aliases)

    async def assign_tags(self, input: TagAssignInput) -> list[Tag]:
        self._record("assign_tags", input)
        service = self.services[input.id]
        for tag in input.tags:
            service.tags = [t for t in service.tags if t.key != tag.key]
            service.tags.append(Tag(id=self._next_id("tag"), key=tag.key, value=tag.value))
        return list(service.tags)

    async def create_tag(self, input: TagCreateInput) -> Tag:
        self._record("create_tag", input)
        tag = Tag(id=self._next_id("tag"), key=input.key, value=input.value)
        self.services[input.id].tags.append(tag)
        return tag

    async def create_tool(self, input: ToolCreateInput) -> Tool:
        self._record("create_tool", input)
        tool = Tool(
            id=self._next_id("tool"),
            category=input.category,
            display_name=input.display_name,
            environment=input.environment,
            url=input.url,
        )
        self.services[input.service_id].tools.append(tool)
        return tool

    async def get_repository_with_alias(self, alias: str) -> Repository | None:
        self._record("get_repository_with_alias", alias)
        for repository in self.repositories.values():
            if repository.default_alias == alias:
                return repository.model_copy(deep=True)
        raise CatalogNotFoundError("Repository", alias)

    async def create_service_repository(
        self, input: ServiceRepositoryCreateInput
    ) -> ServiceRepository:
        self._record("create_service_repository", input)
        repository = next(
            repo
            for repo in self.repositories.values()
            if repo.default_alias == input.repository.alias
        )
        attachment = ServiceRepository(
            id=self._next_id("svcrepo"),
            service_id=input.service.id,
            base_directory=input.base_directory,
            display_name=input.display_name,
        )
        repository.service_repositories.append(attachment)
        return attachment

    async def update_service_repository(
        self, input: ServiceRepositoryUpdateInput
    ) -> ServiceRepository:
        self._record("update_service_repository", input)
        for repository in self.repositories.values():
            for attachment in repository.service_repositories:
                if attachment.id == input.id:
                    attachment.display_name = input.display_name
                    return attachment
        raise CatalogNotFoundError("ServiceRepository", input.id)


class StaticAliasCache:
    """Alias cache backed by fixed dictionaries."""

    def __init__(
        self,
        tiers: list[Tier] | None = None,
        lifecycles: list[Lifecycle] | None = None,
        teams: list[Team] | None = None,
    ) -> None:
        self.tiers = {tier.alias: tier for tier in tiers or []}
        self.lifecycles = {lifecycle.alias: lifecycle for lifecycle in lifecycles or []}
        self.teams = {team.alias: team for team in teams or []}

    def try_get_tier(self, alias: str) -> Tier | None:
        return self.tiers.get(alias)

    def try_get_lifecycle(self, alias: str) -> Lifecycle | None:
        return self.lifecycles.get(alias)

    def try_get_team(self, alias: str) -> Team | None:
        return self.teams.get(alias)


@pytest.fixture
def catalog() -> FakeCatalogClient:
    """Empty in-memory catalog."""

    return FakeCatalogClient()


@pytest.fixture
def alias_cache() -> StaticAliasCache:
    """Alias cache knowing one tier, lifecycle and team."""

    return StaticAliasCache(
        tiers=[Tier(alias="tier_1", name="Mission Critical")],
        lifecycles=[Lifecycle(alias="generally_available", name="GA")],
        teams=[Team(alias="platform", name="Platform")],
    )


@pytest.fixture
def settings() -> Settings:
    return Settings()


@pytest.fixture
def reconciler(
    catalog: FakeCatalogClient, alias_cache: StaticAliasCache, settings: Settings
) -> ServiceReconciler:
    return ServiceReconciler(catalog, alias_cache, settings=settings)


@pytest.fixture
def make_registration() -> Callable[..., ServiceRegistration]:
    """Factory for registrations with sensible defaults."""

    def _make(**overrides: Any) -> ServiceRegistration:
        data: dict[str, Any] = {
            "name": "checkout",
            "aliases": ["k8s:checkout-production"],
            "product": "shop",
            "description": "Checkout service",
            "language": "python",
            "framework": "fastapi",
            "tier": "tier_1",
            "lifecycle": "generally_available",
            "owner": "platform",
        }
        data.update(overrides)
        return ServiceRegistration.model_validate(data)

    return _make
