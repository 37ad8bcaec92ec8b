"""Item Catalog: the immutable, densely id-indexed virtual dataset.

Items are never materialised up front. An id in ``[1, size]`` *is* the
index, so lookup and membership are O(1) arithmetic and each value is
built on demand from its id.
"""

from __future__ import annotations

import logging
from typing import Iterator, List

logger = logging.getLogger(__name__)


class Catalog:
    def __init__(self, size: int, value_prefix: str = "Item") -> None:
        if int(size) <= 0:
            raise ValueError("catalog size must be positive")
        self.size = int(size)
        self.value_prefix = value_prefix
        logger.info("catalog_ready size=%s prefix=%s", self.size, self.value_prefix)

    def __len__(self) -> int:
        return self.size

    def __contains__(self, item_id: object) -> bool:
        return self.contains(item_id)

    def contains(self, item_id: object) -> bool:
        return (
            isinstance(item_id, int)
            and not isinstance(item_id, bool)
            and 1 <= item_id <= self.size
        )

    def value_for(self, item_id: int) -> str:
        return f"{self.value_prefix} {item_id}"

    def ids(self, start: int = 1) -> Iterator[int]:
        """Iterate catalog ids in natural (ascending) order from ``start``."""
        return iter(range(max(1, start), self.size + 1))

    def search(self, term: str) -> List[int]:
        """Return every id whose item matches ``term``, in catalog order.

        An empty term is "no search" and matches everything.
        """
        if not term:
            return list(range(1, self.size + 1))
        needle = term.lower()
        prefix = self.value_prefix.lower() + " "
        if needle in prefix:
            # every value starts with the prefix
            result = list(range(1, self.size + 1))
        else:
            result = [
                i for i in range(1, self.size + 1)
                if needle in f"{prefix}{i}" or term in str(i)
            ]
        logger.info("catalog_search term=%r matched=%s", term, len(result))
        return result


__all__ = ["Catalog"]
