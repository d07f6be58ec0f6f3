"""
Error handling module for catalog-sync.

This module provides the error hierarchy shared by the reconciler and
catalog client implementations.
"""

from .sync_errors import (
    CatalogAPIError,
    CatalogNotFoundError,
    ExternalServiceError,
    ReconciliationError,
    SyncError,
    ValidationError,
)

__all__ = [
    "SyncError",
    "ValidationError",
    "ExternalServiceError",
    "CatalogAPIError",
    "CatalogNotFoundError",
    "ReconciliationError",
]
