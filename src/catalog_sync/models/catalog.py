"""
Pydantic models for entities read from the service catalog.

These mirror what a catalog client returns. They are never built by the
reconciler itself; the capability queries on them drive the upsert passes.
"""

from pydantic import BaseModel, Field


class Tag(BaseModel):
    """Tag attached to a catalog entry."""

    id: str | None = None
    key: str
    value: str


class Tool(BaseModel):
    """Tool attached to a catalog entry."""

    model_config = {"populate_by_name": True}

    id: str | None = None
    category: str
    display_name: str = Field(..., alias="displayName")
    environment: str | None = None
    url: str | None = None


class CatalogService(BaseModel):
    """A service entry in the catalog."""

    model_config = {"populate_by_name": True}

    id: str | None = Field(None, description="Opaque catalog identifier")
    name: str = ""
    aliases: list[str] = Field(default_factory=list)
    product: str | None = None
    description: str | None = None
    language: str | None = None
    framework: str | None = None
    tier: str | None = Field(None, description="Tier alias")
    lifecycle: str | None = Field(None, description="Lifecycle alias")
    owner: str | None = Field(None, description="Owning team alias")
    tags: list[Tag] = Field(default_factory=list)
    tools: list[Tool] = Field(default_factory=list)

    def has_alias(self, alias: str) -> bool:
        return alias in self.aliases

    def has_tag(self, key: str, value: str) -> bool:
        return any(tag.key == key and tag.value == value for tag in self.tags)

    def has_tool(self, category: str, display_name: str, environment: str) -> bool:
        """Tools are identified by their (category, display name, environment)."""
        return any(
            tool.category == category
            and tool.display_name == display_name
            and (tool.environment or "") == (environment or "")
            for tool in self.tools
        )


class ServiceRepository(BaseModel):
    """Attachment of a repository (sub)directory to a service."""

    model_config = {"populate_by_name": True}

    id: str
    service_id: str = Field(..., alias="serviceId")
    base_directory: str | None = Field(None, alias="baseDirectory")
    display_name: str | None = Field(None, alias="displayName")


class Repository(BaseModel):
    """A code repository known to the catalog."""

    model_config = {"populate_by_name": True}

    id: str
    default_alias: str = Field("", alias="defaultAlias")
    name: str = ""
    service_repositories: list[ServiceRepository] = Field(
        default_factory=list, alias="serviceRepositories"
    )

    def get_service(
        self, service_id: str, base_directory: str
    ) -> ServiceRepository | None:
        """
        Find the attachment of this repository to a service.

        Args:
            service_id: Catalog id of the service
            base_directory: Directory within the repository

        Returns:
            The matching attachment, or None when not attached
        """
        for attachment in self.service_repositories:
            if (
                attachment.service_id == service_id
                and (attachment.base_directory or "") == (base_directory or "")
            ):
                return attachment
        return None


class AliasedResource(BaseModel):
    """Catalog resource addressed by alias (tier, lifecycle, team)."""

    id: str | None = None
    alias: str
    name: str = ""


class Tier(AliasedResource):
    """Service tier."""


class Lifecycle(AliasedResource):
    """Service lifecycle stage."""


class Team(AliasedResource):
    """Team owning services."""
