"""
Service layer for catalog-sync.

This module provides the reconciler that keeps catalog entries in line
with the service registrations collected from Kubernetes.
"""

from .base_reconciler import BaseReconciler
from .protocols import AliasCache, CatalogClient
from .service_reconciler import ServiceReconciler

__all__ = [
    "AliasCache",
    "BaseReconciler",
    "CatalogClient",
    "ServiceReconciler",
]
