"""Drag-and-drop reordering with contiguous ``order_index`` values."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from survey_tracker.core.exceptions import NotFoundError


@dataclass(frozen=True)
class ReorderResult:
    ordered_ids: list[Any]
    changed: dict[Any, int]


def reorder(items: Sequence[Any], moved_id: Any, target_index: int) -> ReorderResult:
    """Move ``moved_id`` to ``target_index`` and renumber everything 0..n-1.

    ``items`` is the current display order; each item needs ``id`` and
    ``order_index``. ``changed`` lists only the rows whose index differs from
    what is stored, which is what the caller has to persist.
    """
    ids = [item.id for item in items]
    if moved_id not in ids:
        raise NotFoundError(f"Item not found in ordering: {moved_id}")

    ids.remove(moved_id)
    target = min(max(target_index, 0), len(ids))
    ids.insert(target, moved_id)

    stored = {item.id: item.order_index for item in items}
    changed = {item_id: index for index, item_id in enumerate(ids) if stored[item_id] != index}
    return ReorderResult(ordered_ids=ids, changed=changed)


def next_order_index(items: Sequence[Any]) -> int:
    """Index for an item appended to the end of ``items``."""
    indices = [item.order_index for item in items if item.order_index is not None]
    return (max(indices) + 1) if indices else 0
