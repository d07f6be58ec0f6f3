"""
Utils package - helper modules for catalog-sync.
"""

from catalog_sync.utils.diff import diff_models, format_diff

__all__ = [
    "diff_models",
    "format_diff",
]
