"""
Models package - Pydantic models for type-safe catalog reconciliation.

Defines data models for:
- Service registrations collected from Kubernetes
- Catalog entities returned by the catalog client
- Request payloads and reconciliation results
"""

from .catalog import (
    CatalogService,
    Lifecycle,
    Repository,
    ServiceRepository,
    Tag,
    Team,
    Tier,
    Tool,
)
from .registration import (
    RepositoryRegistration,
    ServiceRegistration,
    TagInput,
    ToolRegistration,
)
from .result import (
    ItemAction,
    ItemKind,
    ItemOutcome,
    ReconcileResult,
    ReconcileStatus,
)

__all__ = [
    "CatalogService",
    "Lifecycle",
    "Repository",
    "ServiceRepository",
    "Tag",
    "Team",
    "Tier",
    "Tool",
    "RepositoryRegistration",
    "ServiceRegistration",
    "TagInput",
    "ToolRegistration",
    "ItemAction",
    "ItemKind",
    "ItemOutcome",
    "ReconcileResult",
    "ReconcileStatus",
]
