"""
Field-level comparison of catalog models.

Used to report what a service update actually changed.
"""

from typing import Any

from pydantic import BaseModel


def diff_models(old: BaseModel, new: BaseModel) -> dict[str, tuple[Any, Any]]:
    """
    Compare two models field by field.

    Args:
        old: State before the change
        new: State after the change

    Returns:
        Mapping of field name to (old value, new value) for every field that differs
    """
    old_data = old.model_dump()
    new_data = new.model_dump()

    changes: dict[str, tuple[Any, Any]] = {}
    for field in sorted(old_data.keys() | new_data.keys()):
        before = old_data.get(field)
        after = new_data.get(field)
        if before != after:
            changes[field] = (before, after)
    return changes


def format_diff(changes: dict[str, tuple[Any, Any]]) -> str:
    return "\n".join(
        f"  {field}: {before!r} -> {after!r}"
        for field, (before, after) in changes.items()
    )
