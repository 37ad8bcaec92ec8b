"""Custom Order Store: the user-defined display sequence of item ids.

Holds the order list alongside a reverse index (id -> position) so that
membership and index-of lookups are O(1). Every primitive that mutates the
list keeps the reverse index in step; the decisions about *when* to
initialise, extend, move or replace live in ``order_engine``.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional

logger = logging.getLogger(__name__)


class CustomOrderStore:
    def __init__(self) -> None:
        self._ids: Optional[List[int]] = None
        self._positions: Dict[int, int] = {}
        self._max_id = 0

    @property
    def initialized(self) -> bool:
        return bool(self._ids)

    @property
    def ids(self) -> List[int]:
        """The live order list. Callers must treat it as read-only."""
        return self._ids if self._ids is not None else []

    @property
    def max_id(self) -> int:
        return self._max_id

    def __len__(self) -> int:
        return len(self._ids) if self._ids is not None else 0

    def __contains__(self, item_id: object) -> bool:
        return item_id in self._positions

    def index_of(self, item_id: int) -> Optional[int]:
        return self._positions.get(item_id)

    def initialize(self, size: int) -> None:
        """Reset the order to the contiguous prefix ``[1..size]``."""
        self._ids = list(range(1, size + 1))
        self._positions = {item_id: idx for idx, item_id in enumerate(self._ids)}
        self._max_id = size
        logger.info("custom_order_initialized length=%s", len(self._ids))

    def append_range(self, start: int, stop: int, batch_size: int) -> int:
        """Append ids ``start..stop`` inclusive in batches; return the batch count.

        Each batch leaves the store consistent, so an interrupted extension is
        still a valid (shorter) order.
        """
        if self._ids is None:
            self._ids = []
        batches = 0
        cursor = start
        while cursor <= stop:
            batch_end = min(stop, cursor + batch_size - 1)
            offset = len(self._ids)
            batch = range(cursor, batch_end + 1)
            self._ids.extend(batch)
            self._positions.update((item_id, offset + i) for i, item_id in enumerate(batch))
            self._max_id = max(self._max_id, batch_end)
            cursor = batch_end + 1
            batches += 1
        return batches

    def move(self, from_index: int, insert_index: int) -> None:
        """Remove the id at ``from_index`` and reinsert it at ``insert_index``.

        ``insert_index`` is a position in the list *after* removal.
        """
        ids = self.ids
        item_id = ids.pop(from_index)
        ids.insert(insert_index, item_id)
        lo = min(from_index, insert_index)
        hi = max(from_index, insert_index)
        for idx in range(lo, hi + 1):
            self._positions[ids[idx]] = idx

    def replace(self, new_ids: Iterable[int]) -> None:
        """Swap in a complete new order in one assignment."""
        ids = list(new_ids)
        positions = {item_id: idx for idx, item_id in enumerate(ids)}
        self._ids, self._positions = ids, positions
        self._max_id = max(ids) if ids else 0

    def head(self, count: int) -> Optional[List[int]]:
        if self._ids is None:
            return None
        return self._ids[:count]


__all__ = ["CustomOrderStore"]
