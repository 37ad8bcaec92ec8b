"""Selection Store: the set of item ids the user has marked selected.

Replaced wholesale on every update, never merged. Insertion order is kept
so the settings snapshot echoes ids in the order they were submitted.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List

logger = logging.getLogger(__name__)


class SelectionStore:
    def __init__(self) -> None:
        self._ids: Dict[int, None] = {}

    def __contains__(self, item_id: object) -> bool:
        return item_id in self._ids

    def replace(self, ids: Iterable[int]) -> int:
        """Replace the whole selection and return its new size."""
        self._ids = dict.fromkeys(ids)
        logger.info("selection_replaced count=%s", len(self._ids))
        return len(self._ids)

    def snapshot(self) -> List[int]:
        return list(self._ids)


__all__ = ["SelectionStore"]
