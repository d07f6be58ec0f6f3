"""
Observability utilities for catalog-sync.

This module provides structured logging with correlation IDs for
troubleshooting reconciliations in production.
"""

from .logging import ReconcileLogger, configure_logging, setup_structured_logging

__all__ = [
    "configure_logging",
    "ReconcileLogger",
    "setup_structured_logging",
]
