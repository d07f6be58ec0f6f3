"""
Pydantic models for service registrations.

A registration is the locally assembled description of a service that
should exist in the catalog. It is produced by the Kubernetes collector
and consumed as-is by the reconciler.
"""

from pydantic import BaseModel, Field


class TagInput(BaseModel):
    """A single key/value tag."""

    key: str = Field(..., description="Tag key")
    value: str = Field(..., description="Tag value")


class ToolRegistration(BaseModel):
    """Tool that should be attached to the service."""

    model_config = {"populate_by_name": True}

    category: str = Field(..., description="Tool category (e.g. logs, metrics)")
    display_name: str = Field(..., alias="displayName", description="Tool name")
    environment: str = Field("", description="Environment the tool applies to")
    url: str = Field("", description="Link to the tool")


class RepositoryRegistration(BaseModel):
    """Repository that should be attached to the service."""

    model_config = {"populate_by_name": True}

    repository_alias: str = Field(
        ..., alias="repositoryAlias", description="Alias of the catalog repository"
    )
    base_directory: str = Field(
        "", alias="baseDirectory", description="Directory of the service in the repo"
    )
    display_name: str = Field(
        "", alias="displayName", description="Display name of the attachment"
    )

    def describe(self) -> str:
        return (
            f"{{Alias: {self.repository_alias}, Directory: {self.base_directory}, "
            f"Name: {self.display_name}}}"
        )


class ServiceRegistration(BaseModel):
    """Desired state of a catalog service."""

    model_config = {"populate_by_name": True}

    name: str = Field("", description="Service name, required to create an entry")
    aliases: list[str] = Field(
        default_factory=list, description="Aliases used to find the catalog entry"
    )
    product: str = Field("", description="Product the service belongs to")
    description: str = Field("", description="Service description")
    language: str = Field("", description="Primary programming language")
    framework: str = Field("", description="Primary framework")
    tier: str = Field("", description="Tier alias, resolved through the alias cache")
    lifecycle: str = Field(
        "", description="Lifecycle alias, resolved through the alias cache"
    )
    owner: str = Field("", description="Owning team alias")
    tag_assigns: dict[str, str] | None = Field(
        None, alias="tagAssigns", description="Tags assigned in a single batch"
    )
    tag_creates: list[TagInput] = Field(
        default_factory=list,
        alias="tagCreates",
        description="Tags created one by one when missing",
    )
    tools: list[ToolRegistration] = Field(default_factory=list)
    repositories: list[RepositoryRegistration] = Field(default_factory=list)

    def to_pretty_json(self) -> str:
        """Render the registration for debug logging."""
        return self.model_dump_json(indent=2, by_alias=True)
