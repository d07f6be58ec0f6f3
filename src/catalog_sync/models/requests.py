"""
Request payloads sent to the catalog client.

Field names serialize to camelCase and unset values are dropped, so an
omitted tier or an empty description is never sent to the catalog.
"""

from typing import Any

from pydantic import BaseModel, Field

from .registration import TagInput


class CatalogRequest(BaseModel):
    """Base class for catalog request payloads."""

    model_config = {"populate_by_name": True}

    def to_payload(self) -> dict[str, Any]:
        """Serialize the request as the catalog API expects it."""
        return self.model_dump(exclude_none=True, by_alias=True)


class IdentifierInput(CatalogRequest):
    """Reference to a catalog resource by id or alias."""

    id: str | None = None
    alias: str | None = None


class ServiceCreateInput(CatalogRequest):
    name: str
    product: str | None = None
    description: str | None = None
    language: str | None = None
    framework: str | None = None
    tier: str | None = Field(None, alias="tierAlias")
    lifecycle: str | None = Field(None, alias="lifecycleAlias")
    owner: str | None = Field(None, alias="ownerAlias")


class ServiceUpdateInput(CatalogRequest):
    id: str
    product: str | None = None
    description: str | None = None
    language: str | None = None
    framework: str | None = None
    tier: str | None = Field(None, alias="tierAlias")
    lifecycle: str | None = Field(None, alias="lifecycleAlias")
    owner: str | None = Field(None, alias="ownerAlias")


class AliasCreateInput(CatalogRequest):
    alias: str
    owner_id: str = Field(..., alias="ownerId")


class TagAssignInput(CatalogRequest):
    id: str
    tags: list[TagInput]


class TagCreateInput(CatalogRequest):
    id: str
    key: str
    value: str


class ToolCreateInput(CatalogRequest):
    category: str
    display_name: str = Field(..., alias="displayName")
    environment: str | None = None
    url: str | None = None
    service_id: str = Field(..., alias="serviceId")


class ServiceRepositoryCreateInput(CatalogRequest):
    repository: IdentifierInput
    service: IdentifierInput
    base_directory: str | None = Field(None, alias="baseDirectory")
    display_name: str | None = Field(None, alias="displayName")


class ServiceRepositoryUpdateInput(CatalogRequest):
    id: str
    display_name: str = Field(..., alias="displayName")
