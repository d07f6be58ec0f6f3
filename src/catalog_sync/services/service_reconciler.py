"""
Service reconciler for keeping catalog entries in sync with registrations.

This module finds or creates the catalog entry for a registration, updates
its descriptive fields, and then upserts its aliases, tags, tools and
repository attachments.
"""

import asyncio
import json
import logging
from collections.abc import Awaitable, Callable

from ..errors import ReconciliationError, ValidationError
from ..models.catalog import CatalogService
from ..models.registration import (
    RepositoryRegistration,
    ServiceRegistration,
    TagInput,
    ToolRegistration,
)
from ..models.requests import (
    AliasCreateInput,
    IdentifierInput,
    ServiceCreateInput,
    ServiceRepositoryCreateInput,
    ServiceRepositoryUpdateInput,
    ServiceUpdateInput,
    TagAssignInput,
    TagCreateInput,
    ToolCreateInput,
)
from ..models.result import ItemAction, ItemKind, ItemOutcome, ReconcileResult
from ..settings import Settings
from ..utils.diff import diff_models, format_diff
from .base_reconciler import BaseReconciler
from .protocols import AliasCache, CatalogClient

UpsertPass = Callable[[ServiceRegistration, CatalogService], Awaitable[list[ItemOutcome]]]


class ServiceReconciler(BaseReconciler):
    """
    Reconciler for catalog service entries.

    Manages:
    - Lookup of the existing entry by alias
    - Creation of missing entries and update of existing ones
    - Alias, tag, tool and repository upserts, run concurrently
    """

    def __init__(
        self,
        catalog_client: CatalogClient,
        alias_cache: AliasCache,
        settings: Settings | None = None,
    ):
        """
        Initialize service reconciler.

        Args:
            catalog_client: Client used for every catalog read and write
            alias_cache: Resolves tier, lifecycle and owner aliases
            settings: Configuration, defaults to the environment-loaded settings
        """
        super().__init__(settings)
        self.catalog_client = catalog_client
        self.alias_cache = alias_cache

    async def do_reconcile(
        self, registration: ServiceRegistration
    ) -> ReconcileResult:
        """
        Reconcile a registration into the catalog.

        Args:
            registration: Desired state of the service

        Returns:
            Result listing the outcome of every item touched

        Raises:
            ValidationError: Registration has no alias, or no name and no match
            ReconciliationError: The catalog entry could not be created
        """
        if not registration.aliases:
            raise ValidationError(
                f"found 0 aliases from kubernetes data for service '{registration.name}'",
                field="aliases",
            )

        self.logger.debug(
            f"Parsed data for service {registration.name}:\n"
            f"{registration.to_pretty_json()}",
            service_name=registration.name,
        )

        result = ReconcileResult(registration_name=registration.name)

        service, needs_update = await self.find_service(registration)
        if service is None:
            if not registration.name:
                aliases = '", "'.join(registration.aliases)
                raise ValidationError(
                    f'unable to create service with an empty name. aliases = ["{aliases}"]',
                    field="name",
                )
            service = await self.ensure_service_created(registration)
            result.record(
                ItemKind.SERVICE, service.name, ItemAction.CREATED, "Created new service"
            )

        result.service_id = service.id

        if needs_update:
            result.outcomes.append(await self.update_service(registration, service))

        result.outcomes.extend(await self.run_upsert_passes(registration, service))
        return result

    async def find_service(
        self, registration: ServiceRegistration
    ) -> tuple[CatalogService | None, bool]:
        """
        Find the catalog entry matching one of the registration's aliases.

        Aliases are tried in order and the first one resolving to an entry
        with an id wins.

        Args:
            registration: Registration whose aliases are looked up

        Returns:
            (entry, needs_update), or (None, False) when no alias resolves
        """
        for alias in registration.aliases:
            if not alias:
                continue
            try:
                found = await self.catalog_client.get_service_with_alias(alias)
            except Exception as e:
                self.logger.debug(
                    f"No service found with alias '{alias}': {e}",
                    service_name=registration.name,
                )
                continue

            if found is not None and found.id:
                self.logger.info(
                    f"Reconciling service {found.name} found with alias '{alias}'",
                    service_name=found.name,
                    service_id=found.id,
                )
                return found, True

        # TODO: fall back to a lookup by registration name
        return None, False

    async def ensure_service_created(
        self, registration: ServiceRegistration
    ) -> CatalogService:
        """
        Create the catalog entry for a registration.

        Raises:
            ReconciliationError: The catalog rejected the create call
        """
        try:
            service = await self.create_service(registration)
        except Exception as e:
            raise ReconciliationError(
                f"Failed creating service '{registration.name}': {e}", cause=e
            ) from e

        if not service.id:
            raise ReconciliationError(
                f"Catalog returned no id for created service '{registration.name}'"
            )

        self.logger.info(
            f"Created new service {service.name}",
            service_name=service.name,
            service_id=service.id,
        )
        return service

    async def create_service(self, registration: ServiceRegistration) -> CatalogService:
        create_input = ServiceCreateInput(
            name=registration.name, **self._service_fields(registration)
        )
        return await self.catalog_client.create_service(create_input)

    async def update_service(
        self, registration: ServiceRegistration, service: CatalogService
    ) -> ItemOutcome:
        """
        Update the descriptive fields of an existing entry.

        Best effort: a failure is logged and reported as a failed outcome,
        never raised.
        """
        update_input = ServiceUpdateInput(
            id=service.id, **self._service_fields(registration)
        )
        try:
            updated = await self.catalog_client.update_service(update_input)
        except Exception as e:
            return self._outcome(
                service,
                ItemKind.SERVICE,
                service.name,
                ItemAction.FAILED,
                f"Failed updating service {service.name}: {e}",
                level=logging.ERROR,
                error=e,
            )

        if self.settings.log_update_diffs:
            changes = diff_models(service, updated)
            if changes:
                self.logger.info(
                    f"Updated service {service.name} - diff:\n{format_diff(changes)}",
                    service_name=service.name,
                    service_id=service.id,
                )

        return self._outcome(
            service,
            ItemKind.SERVICE,
            service.name,
            ItemAction.UPDATED,
            f"Updated service {service.name}",
            level=logging.DEBUG,
        )

    def _service_fields(self, registration: ServiceRegistration) -> dict[str, str | None]:
        """Fields shared by create and update, with empty values omitted."""
        tier = (
            self.alias_cache.try_get_tier(registration.tier)
            if registration.tier
            else None
        )
        lifecycle = (
            self.alias_cache.try_get_lifecycle(registration.lifecycle)
            if registration.lifecycle
            else None
        )
        owner = (
            self.alias_cache.try_get_team(registration.owner)
            if registration.owner
            else None
        )
        return {
            "product": registration.product or None,
            "description": registration.description or None,
            "language": registration.language or None,
            "framework": registration.framework or None,
            "tier": tier.alias if tier else None,
            "lifecycle": lifecycle.alias if lifecycle else None,
            "owner": owner.alias if owner else None,
        }

    async def run_upsert_passes(
        self, registration: ServiceRegistration, service: CatalogService
    ) -> list[ItemOutcome]:
        """
        Run the alias, tag, tool and repository passes concurrently.

        The passes are independent and order-insensitive. All of them are
        awaited; a pass that raises is reported as a single failed outcome.
        """
        passes: dict[ItemKind, UpsertPass] = {
            ItemKind.ALIAS: self.handle_aliases,
            ItemKind.TAG: self.handle_tags,
            ItemKind.TOOL: self.handle_tools,
            ItemKind.REPOSITORY: self.handle_repositories,
        }
        results = await asyncio.gather(
            *(upsert(registration, service) for upsert in passes.values()),
            return_exceptions=True,
        )

        outcomes: list[ItemOutcome] = []
        for kind, pass_result in zip(passes, results, strict=True):
            if isinstance(pass_result, Exception):
                outcomes.append(
                    self._outcome(
                        service,
                        kind,
                        "*",
                        ItemAction.FAILED,
                        f"Failed processing {kind.value}s for service {service.name}: "
                        f"{pass_result}",
                        level=logging.ERROR,
                        error=pass_result,
                    )
                )
            elif isinstance(pass_result, BaseException):
                raise pass_result
            else:
                outcomes.extend(pass_result)
        return outcomes

    # Aliases

    async def handle_aliases(
        self, registration: ServiceRegistration, service: CatalogService
    ) -> list[ItemOutcome]:
        outcomes = []
        for alias in registration.aliases:
            if not alias:
                continue
            outcomes.append(await self._upsert_alias(alias, service))
        return outcomes

    async def _upsert_alias(self, alias: str, service: CatalogService) -> ItemOutcome:
        if service.has_alias(alias):
            return self._outcome(
                service,
                ItemKind.ALIAS,
                alias,
                ItemAction.SKIPPED,
                f"Alias '{alias}' already assigned to service {service.name}",
            )

        try:
            await self.catalog_client.create_alias(
                AliasCreateInput(alias=alias, owner_id=service.id)
            )
        except Exception as e:
            return self._outcome(
                service,
                ItemKind.ALIAS,
                alias,
                ItemAction.FAILED,
                f"Failed assigning alias '{alias}' to service {service.name}: {e}",
                level=logging.ERROR,
                error=e,
            )

        return self._outcome(
            service,
            ItemKind.ALIAS,
            alias,
            ItemAction.CREATED,
            f"Assigned alias '{alias}' to service {service.name}",
            level=logging.INFO,
        )

    # Tags

    async def handle_tags(
        self, registration: ServiceRegistration, service: CatalogService
    ) -> list[ItemOutcome]:
        outcomes = []
        assigned = await self.assign_tags(registration, service)
        if assigned is not None:
            outcomes.append(assigned)
        outcomes.extend(await self.create_tags(registration, service))
        return outcomes

    async def assign_tags(
        self, registration: ServiceRegistration, service: CatalogService
    ) -> ItemOutcome | None:
        """
        Assign the tag mapping in one batch.

        The catalog applies the whole mapping or none of it, so a single
        outcome is reported for the batch.
        """
        if registration.tag_assigns is None:
            return None

        tags_json = json.dumps(registration.tag_assigns, sort_keys=True)
        assign_input = TagAssignInput(
            id=service.id,
            tags=[
                TagInput(key=key, value=value)
                for key, value in registration.tag_assigns.items()
            ],
        )
        try:
            await self.catalog_client.assign_tags(assign_input)
        except Exception as e:
            return self._outcome(
                service,
                ItemKind.TAG,
                tags_json,
                ItemAction.FAILED,
                f"Failed assigning tags {tags_json} to service {service.name}: {e}",
                level=logging.ERROR,
                error=e,
            )

        return self._outcome(
            service,
            ItemKind.TAG,
            tags_json,
            ItemAction.UPDATED,
            f"Assigned tags {tags_json} to service {service.name}",
            level=logging.INFO,
        )

    async def create_tags(
        self, registration: ServiceRegistration, service: CatalogService
    ) -> list[ItemOutcome]:
        outcomes = []
        for tag in registration.tag_creates:
            outcomes.append(await self._create_tag(tag, service))
        return outcomes

    async def _create_tag(self, tag: TagInput, service: CatalogService) -> ItemOutcome:
        key = f"{tag.key} = {tag.value}"
        if service.has_tag(tag.key, tag.value):
            return self._outcome(
                service,
                ItemKind.TAG,
                key,
                ItemAction.SKIPPED,
                f"Tag '{key}' already exists on service {service.name}",
            )

        try:
            await self.catalog_client.create_tag(
                TagCreateInput(id=service.id, key=tag.key, value=tag.value)
            )
        except Exception as e:
            return self._outcome(
                service,
                ItemKind.TAG,
                key,
                ItemAction.FAILED,
                f"Failed creating tag '{key}' on service {service.name}: {e}",
                level=logging.ERROR,
                error=e,
            )

        return self._outcome(
            service,
            ItemKind.TAG,
            key,
            ItemAction.CREATED,
            f"Created tag '{key}' on service {service.name}",
            level=logging.INFO,
        )

    # Tools

    async def handle_tools(
        self, registration: ServiceRegistration, service: CatalogService
    ) -> list[ItemOutcome]:
        outcomes = []
        for tool in registration.tools:
            outcomes.append(await self._upsert_tool(tool, service))
        return outcomes

    async def _upsert_tool(
        self, tool: ToolRegistration, service: CatalogService
    ) -> ItemOutcome:
        key = (
            f"{{Category: {tool.category}, Environment: {tool.environment}, "
            f"Name: {tool.display_name}}}"
        )
        if service.has_tool(tool.category, tool.display_name, tool.environment):
            return self._outcome(
                service,
                ItemKind.TOOL,
                key,
                ItemAction.SKIPPED,
                f"Tool '{key}' already exists on service {service.name} ... skipping",
            )

        tool_input = ToolCreateInput(
            category=tool.category,
            display_name=tool.display_name,
            environment=tool.environment or None,
            url=tool.url or None,
            service_id=service.id,
        )
        try:
            await self.catalog_client.create_tool(tool_input)
        except Exception as e:
            return self._outcome(
                service,
                ItemKind.TOOL,
                key,
                ItemAction.FAILED,
                f"Failed assigning tool '{key}' to service {service.name}: {e}",
                level=logging.ERROR,
                error=e,
            )

        return self._outcome(
            service,
            ItemKind.TOOL,
            key,
            ItemAction.CREATED,
            f"Ensured tool '{key}' on service {service.name}",
            level=logging.INFO,
        )

    # Repositories

    async def handle_repositories(
        self, registration: ServiceRegistration, service: CatalogService
    ) -> list[ItemOutcome]:
        outcomes = []
        for repository in registration.repositories:
            outcomes.append(await self._upsert_repository(repository, service))
        return outcomes

    async def _upsert_repository(
        self, repository: RepositoryRegistration, service: CatalogService
    ) -> ItemOutcome:
        key = repository.describe()

        lookup_error: Exception | None = None
        try:
            found = await self.catalog_client.get_repository_with_alias(
                repository.repository_alias
            )
        except Exception as e:
            found = None
            lookup_error = e

        if found is None:
            return self._outcome(
                service,
                ItemKind.REPOSITORY,
                key,
                ItemAction.SKIPPED,
                f"Repository '{key}' not found so it cannot be attached to service "
                f"{service.name} ... skipping",
                level=logging.WARNING,
                error=lookup_error,
            )

        attachment = found.get_service(service.id, repository.base_directory)
        if attachment is not None:
            if (
                repository.display_name
                and (attachment.display_name or "") != repository.display_name
            ):
                return await self._update_repository_name(
                    attachment.id, repository, service
                )
            return self._outcome(
                service,
                ItemKind.REPOSITORY,
                key,
                ItemAction.SKIPPED,
                f"Repository '{key}' already attached to service {service.name} "
                "... skipping",
            )

        create_input = ServiceRepositoryCreateInput(
            repository=IdentifierInput(alias=repository.repository_alias),
            service=IdentifierInput(id=service.id),
            base_directory=repository.base_directory or None,
            display_name=repository.display_name or None,
        )
        try:
            await self.catalog_client.create_service_repository(create_input)
        except Exception as e:
            return self._outcome(
                service,
                ItemKind.REPOSITORY,
                key,
                ItemAction.FAILED,
                f"Failed attaching repository '{key}' to service {service.name}: {e}",
                level=logging.ERROR,
                error=e,
            )

        return self._outcome(
            service,
            ItemKind.REPOSITORY,
            key,
            ItemAction.CREATED,
            f"Attached repository '{key}' to service {service.name}",
            level=logging.INFO,
        )

    async def _update_repository_name(
        self,
        attachment_id: str,
        repository: RepositoryRegistration,
        service: CatalogService,
    ) -> ItemOutcome:
        key = repository.describe()
        try:
            await self.catalog_client.update_service_repository(
                ServiceRepositoryUpdateInput(
                    id=attachment_id, display_name=repository.display_name
                )
            )
        except Exception as e:
            return self._outcome(
                service,
                ItemKind.REPOSITORY,
                key,
                ItemAction.FAILED,
                f"Failed updating repository '{key}' on service {service.name}: {e}",
                level=logging.ERROR,
                error=e,
            )

        return self._outcome(
            service,
            ItemKind.REPOSITORY,
            key,
            ItemAction.UPDATED,
            f"Updated repository '{key}' on service {service.name}",
            level=logging.INFO,
        )

    def _outcome(
        self,
        service: CatalogService,
        kind: ItemKind,
        key: str,
        action: ItemAction,
        message: str,
        level: int = logging.DEBUG,
        error: Exception | None = None,
    ) -> ItemOutcome:
        """Log an item outcome and return it."""
        self.logger.log_item(
            level,
            message,
            service_name=service.name,
            item_kind=kind.value,
            item_key=key,
            action=action.value,
            error=error,
        )
        return ItemOutcome(kind=kind, key=key, action=action, message=message)
