"""Order Engine: windowed page retrieval and order mutations.

Combines the Catalog, the Custom Order Store and the Selection Store.

Retrieval walks the custom order only as far as the requested page needs
(the "visible window", doubled unless reorder lookahead is suppressed),
keeps the ids that match the current search, then backfills candidates the
walk did not reach in natural id order so totals never silently drop items.

Mutations extend the custom order lazily: an id beyond the current maximum
pulls in every id up to it, so the order is always a permutation of a
contiguous prefix ``[1..max]`` of the catalog.

All store access runs under one re-entrant lock. FastAPI executes the
synchronous route handlers on a thread pool and every operation here is a
read-modify-write of shared state.
"""

from __future__ import annotations

import logging
import threading
import time
from collections import Counter
from itertools import islice
from typing import Callable, List, Optional, Sequence

from paginator.config import AppConfig
from paginator.logic.catalog import Catalog
from paginator.logic.errors import InternalOrderError, InvalidInputError, NotFoundError
from paginator.logic.order_store import CustomOrderStore
from paginator.logic.selection_store import SelectionStore
from paginator.models.items import ItemView, PageRequest, PageResult, SettingsView

logger = logging.getLogger(__name__)

# Outward scan distance for the degraded insertion path in move()
FALLBACK_SCAN_RADIUS = 10


class OrderEngine:
    def __init__(
        self,
        catalog: Catalog,
        order: Optional[CustomOrderStore] = None,
        selection: Optional[SelectionStore] = None,
        *,
        initial_size: int = 10_000,
        extend_batch_size: int = 10_000,
        window_lookahead: int = 1_000,
        settings_cap: int = 5_000,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.catalog = catalog
        self.order = order if order is not None else CustomOrderStore()
        self.selection = selection if selection is not None else SelectionStore()
        self.initial_size = min(max(0, int(initial_size)), catalog.size)
        self.extend_batch_size = max(1, int(extend_batch_size))
        self.window_lookahead = max(0, int(window_lookahead))
        self.settings_cap = max(1, int(settings_cap))
        self._clock = clock
        self._lock = threading.RLock()

    @classmethod
    def from_config(cls, config: AppConfig, **kwargs) -> "OrderEngine":
        catalog = Catalog(config.catalog.size, config.catalog.value_prefix)
        return cls(
            catalog,
            initial_size=config.order.initial_size,
            extend_batch_size=config.order.extend_batch_size,
            window_lookahead=config.order.window_lookahead,
            settings_cap=config.order.settings_cap,
            **kwargs,
        )

    # ------------------------------------------------------------------
    # Initialisation and extension
    # ------------------------------------------------------------------

    def ensure_initialized(self) -> bool:
        """Create the prefix order ``[1..initial_size]`` if absent or empty."""
        with self._lock:
            if self.order.initialized:
                return False
            logger.info("custom_order_lazy_init initial_size=%s", self.initial_size)
            self.order.initialize(self.initial_size)
            return True

    def extend(self, max_needed_id: int) -> bool:
        """Make sure the order reaches ``max_needed_id``; True if it changed.

        Ids at or below the current maximum are treated as covered even when
        absent. Ids above it are appended contiguously in ascending order.
        """
        with self._lock:
            occurred = self.ensure_initialized()
            target = min(int(max_needed_id), self.catalog.size)
            if target in self.order:
                return occurred
            current_max = self.order.max_id
            if target <= current_max:
                return occurred
            batches = self.order.append_range(current_max + 1, target, self.extend_batch_size)
            logger.info(
                "custom_order_extended from_id=%s to_id=%s batches=%s length=%s",
                current_max + 1,
                target,
                batches,
                len(self.order),
            )
            return True

    def _extend_or_fail(self, max_needed_id: int) -> None:
        try:
            self.extend(max_needed_id)
        except Exception as exc:
            logger.error("custom_order_extend_failed max_needed_id=%s", max_needed_id, exc_info=True)
            raise InternalOrderError(
                "Failed to extend custom order",
                {"maxNeededId": max_needed_id, "orderLength": len(self.order)},
            ) from exc

    # ------------------------------------------------------------------
    # Retrieval
    # ------------------------------------------------------------------

    def retrieve(self, request: PageRequest) -> PageResult:
        with self._lock:
            self.ensure_initialized()
            page, limit, search = request.page, request.limit, request.search
            suppress = request.suppress_reorder_window

            candidates: Optional[List[int]] = None
            if search:
                candidates = self.catalog.search(search)
                matched = set(candidates)
                is_candidate = matched.__contains__
                total = len(candidates)
            else:
                is_candidate = self.catalog.contains
                total = self.catalog.size

            window = limit * page * (1 if suppress else 2)
            order_ids = self.order.ids
            if search or suppress:
                walk = iter(order_ids)
            else:
                walk = islice(order_ids, min(len(order_ids), window + self.window_lookahead))

            ordered: List[int] = []
            for item_id in walk:
                if is_candidate(item_id):
                    ordered.append(item_id)
                    if len(ordered) >= window:
                        break
            walked = len(ordered)

            if len(ordered) < total:
                used = set(ordered)
                if candidates is None:
                    # never more than the catalog holds
                    needed = min(page * limit, total) - len(ordered)
                    if needed > 0:
                        ordered.extend(
                            islice((i for i in self.catalog.ids() if i not in used), needed)
                        )
                else:
                    ordered.extend(i for i in candidates if i not in used)

            start = (page - 1) * limit
            end = page * limit
            items = [
                ItemView(id=i, value=self.catalog.value_for(i), selected=i in self.selection)
                for i in ordered[start:end]
            ]
            logger.info(
                "page_assembled page=%s limit=%s search=%r window=%s ordered=%s backfilled=%s returned=%s",
                page,
                limit,
                search,
                window,
                walked,
                len(ordered) - walked,
                len(items),
            )
            return PageResult(
                items=items,
                total_items=total,
                current_page=page,
                total_pages=-(-total // limit),
                has_more=end < total,
                server_timestamp=int(self._clock() * 1000),
            )

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def move(self, from_id: int, to_id: int) -> None:
        """Splice ``from_id`` next to ``to_id``.

        Moving forward drops the item after the target, moving backward
        drops it before the target.
        """
        with self._lock:
            missing = [i for i in (from_id, to_id) if not self.catalog.contains(i)]
            if missing:
                raise NotFoundError(
                    "Items not found in catalog",
                    {"fromId": from_id, "toId": to_id, "missingIds": missing},
                )
            self.ensure_initialized()
            self._extend_or_fail(max(from_id, to_id))

            from_index = self.order.index_of(from_id)
            to_index = self.order.index_of(to_id)
            logger.info(
                "order_move from_id=%s to_id=%s from_index=%s to_index=%s",
                from_id,
                to_id,
                from_index,
                to_index,
            )
            if from_index is None or to_index is None:
                raise NotFoundError(
                    "Items not found in customOrder",
                    {
                        "fromId": from_id,
                        "toId": to_id,
                        "fromIndex": -1 if from_index is None else from_index,
                        "toIndex": -1 if to_index is None else to_index,
                        "orderLength": len(self.order),
                    },
                )
            if from_id == to_id:
                return

            ids = self.order.ids
            if ids[to_index] == to_id:
                # Position of to_id once from_id has been taken out
                to_after = to_index - 1 if from_index < to_index else to_index
                insert_index = to_after + 1 if from_index < to_index else to_after
            else:
                insert_index = self.fallback_insert_index(to_id, from_id, from_index)
            self.order.move(from_index, insert_index)
            logger.info("order_moved from_id=%s insert_index=%s", from_id, insert_index)

    def fallback_insert_index(self, to_id: int, from_id: int, from_index: int) -> int:
        """Degraded insertion point when ``to_id`` cannot be located.

        Scans outward from ``to_id`` (-1, +1, -2, +2, ...) for the nearest id
        still in the order and inserts at its position; index 0 when nothing
        is found. Only reachable if the reverse index is out of step with the
        order list, so hitting it indicates a store inconsistency.
        """
        logger.warning("order_move_fallback to_id=%s from_id=%s", to_id, from_id)
        for offset in range(1, FALLBACK_SCAN_RADIUS + 1):
            for neighbour in (to_id - offset, to_id + offset):
                if neighbour == from_id:
                    continue
                idx = self.order.index_of(neighbour)
                if idx is not None:
                    return idx - 1 if idx > from_index else idx
        return 0

    def replace(self, order: Sequence[int]) -> None:
        """Put ``order`` first, then every other known id in its existing order."""
        with self._lock:
            ids = list(order)
            if not ids:
                raise InvalidInputError("order must be a non-empty array", {"field": "order"})
            unknown = [i for i in ids if not self.catalog.contains(i)]
            if unknown:
                raise InvalidInputError(
                    "order contains ids outside the catalog",
                    {"field": "order", "invalidValues": unknown[:10]},
                )
            if len(set(ids)) != len(ids):
                duplicates = sorted(i for i, n in Counter(ids).items() if n > 1)
                raise InvalidInputError(
                    "order contains duplicate ids",
                    {"field": "order", "duplicateIds": duplicates[:10]},
                )
            self.ensure_initialized()
            self._extend_or_fail(max(ids))

            explicit = set(ids)
            new_order = ids + [i for i in self.order.ids if i not in explicit]
            self.order.replace(new_order)
            logger.info(
                "order_replaced explicit_length=%s total_length=%s",
                len(ids),
                len(new_order),
            )

    def set_selection(self, ids: Sequence[int]) -> int:
        with self._lock:
            return self.selection.replace(ids)

    def settings(self) -> SettingsView:
        with self._lock:
            return SettingsView(
                selected_ids=self.selection.snapshot(),
                custom_order=self.order.head(self.settings_cap),
            )


__all__ = ["OrderEngine", "FALLBACK_SCAN_RADIUS"]
