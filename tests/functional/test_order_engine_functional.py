"""Functional tests for the order engine.

Covers page retrieval (windowing, search, backfill, totals), lazy extension,
single moves, bulk replace, selection and the settings snapshot, all against
an isolated 200-item catalog.
"""

from __future__ import annotations

import random
import threading

import pytest

from paginator.logic.errors import InternalOrderError, InvalidInputError, NotFoundError
from paginator.logic.order_engine import OrderEngine
from paginator.models.items import PageRequest

from tests.functional.engine_helpers import (
    SMALL_CAP,
    SMALL_CATALOG,
    SMALL_INITIAL,
    all_pages,
    page_ids,
    small_config,
)


def _matches(item_id: int, term: str) -> bool:
    return term.lower() in f"item {item_id}" or term in str(item_id)


def _assert_reverse_index(engine: OrderEngine) -> None:
    for idx, item_id in enumerate(engine.order.ids):
        assert engine.order.index_of(item_id) == idx


# ----------------------------------------------------------------------------
# Retrieval
# ----------------------------------------------------------------------------

def test_order_is_created_lazily_on_first_page(engine: OrderEngine) -> None:
    assert not engine.order.initialized
    page_ids(engine, 1, 5)
    assert engine.order.ids == list(range(1, SMALL_INITIAL + 1))


def test_first_page_follows_id_order(engine: OrderEngine) -> None:
    result = engine.retrieve(PageRequest(page=1, limit=2))
    assert [item.id for item in result.items] == [1, 2]
    assert [item.value for item in result.items] == ["Item 1", "Item 2"]
    assert result.total_items == SMALL_CATALOG
    assert result.total_pages == SMALL_CATALOG // 2
    assert result.has_more is True
    assert result.current_page == 1
    assert result.server_timestamp == 1_700_000_000_500


@pytest.mark.parametrize("page,limit", [(1, 3), (3, 7), (17, 3), (60, 3), (99, 9)])
def test_total_items_is_catalog_size_without_search(engine: OrderEngine, page: int, limit: int) -> None:
    result = engine.retrieve(PageRequest(page=page, limit=limit))
    assert result.total_items == SMALL_CATALOG
    assert result.total_pages == -(-SMALL_CATALOG // limit)


def test_last_page_reports_no_more(engine: OrderEngine) -> None:
    result = engine.retrieve(PageRequest(page=20, limit=10))
    assert [item.id for item in result.items] == list(range(191, 201))
    assert result.has_more is False


def test_oversized_page_request_returns_whole_catalog(engine: OrderEngine) -> None:
    result = engine.retrieve(PageRequest(page=1, limit=10**19))
    assert [item.id for item in result.items] == list(range(1, SMALL_CATALOG + 1))
    assert result.total_pages == 1
    assert result.has_more is False


def test_astronomical_page_number_is_empty(engine: OrderEngine) -> None:
    result = engine.retrieve(PageRequest(page=10**19, limit=1))
    assert result.items == []
    assert result.total_items == SMALL_CATALOG
    assert result.has_more is False


def test_page_beyond_end_is_empty(engine: OrderEngine) -> None:
    result = engine.retrieve(PageRequest(page=50, limit=10))
    assert result.items == []
    assert result.total_items == SMALL_CATALOG
    assert result.has_more is False


def test_pages_past_the_order_are_backfilled_in_id_order(engine: OrderEngine) -> None:
    # Order covers 1..50; page 9 at limit 6 spans 49..54
    assert page_ids(engine, 9, 6) == [49, 50, 51, 52, 53, 54]
    assert len(engine.order) == SMALL_INITIAL


@pytest.mark.parametrize("term", ["1", "2", "99", "0"])
def test_search_total_matches_catalog_count(engine: OrderEngine, term: str) -> None:
    expected = [i for i in range(1, SMALL_CATALOG + 1) if _matches(i, term)]
    result = engine.retrieve(PageRequest(page=1, limit=5, search=term))
    assert result.total_items == len(expected)
    assert result.total_pages == -(-len(expected) // 5)


def test_search_is_case_insensitive_on_value(engine: OrderEngine) -> None:
    found = all_pages(engine, 4, search="ITEM 12")
    assert sorted(found) == [12] + list(range(120, 130))


def test_search_on_common_prefix_matches_everything(engine: OrderEngine) -> None:
    result = engine.retrieve(PageRequest(page=1, limit=5, search="tem"))
    assert result.total_items == SMALL_CATALOG


def test_search_without_matches_is_empty(engine: OrderEngine) -> None:
    result = engine.retrieve(PageRequest(page=1, limit=5, search="zzz"))
    assert result.items == []
    assert result.total_items == 0
    assert result.total_pages == 0
    assert result.has_more is False


def test_search_keeps_custom_order_for_matched_ids(engine: OrderEngine) -> None:
    engine.move(21, 1)
    assert page_ids(engine, 1, 3, search="1") == [21, 1, 10]


@pytest.mark.parametrize("no_reorder", [False, True])
def test_pages_concatenate_to_full_order_without_search(engine: OrderEngine, no_reorder: bool) -> None:
    engine.move(40, 2)
    engine.move(5, 45)
    engine.move(120, 3)
    expected = list(engine.order.ids) + [i for i in range(1, SMALL_CATALOG + 1) if i not in engine.order]
    found = all_pages(engine, 7, no_reorder=no_reorder)
    assert found == expected
    assert sorted(found) == list(range(1, SMALL_CATALOG + 1))


@pytest.mark.parametrize("no_reorder", [False, True])
def test_pages_concatenate_to_full_result_with_search(engine: OrderEngine, no_reorder: bool) -> None:
    engine.move(31, 1)
    engine.move(11, 40)
    engine.replace([41, 18])
    term = "1"
    ordered = [i for i in engine.order.ids if _matches(i, term)]
    expected = ordered + [
        i for i in range(1, SMALL_CATALOG + 1) if _matches(i, term) and i not in engine.order
    ]
    found = all_pages(engine, 4, search=term, no_reorder=no_reorder)
    assert found == expected
    assert len(found) == len(set(found))


def test_selection_flags_returned_items(engine: OrderEngine) -> None:
    engine.set_selection([2, 4])
    result = engine.retrieve(PageRequest(page=1, limit=5))
    assert {item.id: item.selected for item in result.items} == {
        1: False,
        2: True,
        3: False,
        4: True,
        5: False,
    }


def test_selection_replace_is_total(engine: OrderEngine) -> None:
    engine.set_selection([5, 9])
    engine.set_selection([9])
    result = engine.retrieve(PageRequest(page=1, limit=10))
    assert [item.id for item in result.items if item.selected] == [9]


# ----------------------------------------------------------------------------
# Extension
# ----------------------------------------------------------------------------

def test_extend_on_absent_order_initialises_and_reports(engine: OrderEngine) -> None:
    assert engine.extend(10) is True
    assert engine.order.ids == list(range(1, SMALL_INITIAL + 1))


def test_extend_is_idempotent(engine: OrderEngine) -> None:
    engine.ensure_initialized()
    assert engine.extend(75) is True
    once = list(engine.order.ids)
    assert engine.extend(75) is False
    assert engine.order.ids == once == list(range(1, 76))
    _assert_reverse_index(engine)


def test_extend_within_current_range_is_noop(engine: OrderEngine) -> None:
    engine.ensure_initialized()
    assert engine.extend(30) is False
    assert len(engine.order) == SMALL_INITIAL


def test_extend_result_does_not_depend_on_batch_size() -> None:
    small = OrderEngine.from_config(small_config())
    big = OrderEngine(small.catalog, initial_size=SMALL_INITIAL, extend_batch_size=1000)
    for eng in (small, big):
        eng.ensure_initialized()
        eng.move(3, 1)
        eng.extend(133)
    assert small.order.ids == big.order.ids
    assert small.order.max_id == big.order.max_id == 133


def test_extend_is_clamped_to_catalog(engine: OrderEngine) -> None:
    engine.extend(10_000)
    assert engine.order.ids == list(range(1, SMALL_CATALOG + 1))


# ----------------------------------------------------------------------------
# Move
# ----------------------------------------------------------------------------

def test_move_forward_lands_after_target(engine: OrderEngine) -> None:
    engine.move(1, 3)
    assert engine.order.ids[:4] == [2, 3, 1, 4]


def test_move_backward_lands_before_target(engine: OrderEngine) -> None:
    engine.move(5, 2)
    assert engine.order.ids[:6] == [1, 5, 2, 3, 4, 6]


def test_move_round_trip_restores_order(engine: OrderEngine) -> None:
    engine.ensure_initialized()
    before = list(engine.order.ids)
    engine.move(2, 6)
    assert engine.order.ids[:7] == [1, 3, 4, 5, 6, 2, 7]
    engine.move(2, 3)
    assert engine.order.ids == before
    _assert_reverse_index(engine)


def test_move_extends_order_for_unseen_id(engine: OrderEngine) -> None:
    engine.move(120, 1)
    assert len(engine.order) == 120
    assert engine.order.ids[:3] == [120, 1, 2]
    assert sorted(engine.order.ids) == list(range(1, 121))


def test_move_to_same_id_changes_nothing(engine: OrderEngine) -> None:
    engine.move(7, 7)
    assert engine.order.ids == list(range(1, SMALL_INITIAL + 1))


def test_move_unknown_id_is_not_found(engine: OrderEngine) -> None:
    with pytest.raises(NotFoundError) as excinfo:
        engine.move(1, SMALL_CATALOG + 1)
    assert excinfo.value.fields["missingIds"] == [SMALL_CATALOG + 1]
    assert excinfo.value.fields["fromId"] == 1


def test_many_moves_keep_reverse_index_consistent(engine: OrderEngine) -> None:
    for from_id, to_id in [(10, 40), (40, 1), (49, 2), (60, 25), (1, 60), (25, 24)]:
        engine.move(from_id, to_id)
    _assert_reverse_index(engine)
    assert sorted(engine.order.ids) == list(range(1, 61))


def test_concurrent_mutations_keep_order_a_permutation(engine: OrderEngine) -> None:
    errors: list[Exception] = []

    def worker(seed: int) -> None:
        rng = random.Random(seed)
        try:
            for _ in range(60):
                op = rng.randrange(4)
                if op == 0:
                    engine.move(rng.randint(1, SMALL_CATALOG), rng.randint(1, SMALL_CATALOG))
                elif op == 1:
                    engine.replace(rng.sample(range(1, SMALL_CATALOG + 1), 3))
                elif op == 2:
                    engine.extend(rng.randint(1, SMALL_CATALOG))
                else:
                    engine.retrieve(PageRequest(page=rng.randint(1, 5), limit=rng.randint(1, 30)))
        except Exception as exc:  # re-raised as a failure below
            errors.append(exc)

    threads = [threading.Thread(target=worker, args=(seed,)) for seed in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert errors == []
    assert len(engine.order.ids) == len(set(engine.order.ids))
    assert sorted(engine.order.ids) == list(range(1, engine.order.max_id + 1))
    _assert_reverse_index(engine)


def test_fallback_insert_uses_nearest_present_neighbour(engine: OrderEngine) -> None:
    engine.ensure_initialized()
    # 9 sits at index 8; after taking index 0 out it is at 7
    assert engine.fallback_insert_index(to_id=10, from_id=1, from_index=0) == 7
    # 11 sits at index 10, before the removed index 20
    assert engine.fallback_insert_index(to_id=10, from_id=9, from_index=20) == 10


def test_fallback_insert_defaults_to_front(engine: OrderEngine) -> None:
    engine.ensure_initialized()
    assert engine.fallback_insert_index(to_id=150, from_id=1, from_index=0) == 0


def test_failed_extension_leaves_order_untouched(engine: OrderEngine, monkeypatch: pytest.MonkeyPatch) -> None:
    engine.ensure_initialized()
    before = list(engine.order.ids)

    def _boom(*args, **kwargs):
        raise MemoryError("no room")

    monkeypatch.setattr(engine.order, "append_range", _boom)
    with pytest.raises(InternalOrderError) as excinfo:
        engine.move(1, 150)
    assert excinfo.value.fields["maxNeededId"] == 150
    assert engine.order.ids == before


# ----------------------------------------------------------------------------
# Bulk replace
# ----------------------------------------------------------------------------

def test_replace_puts_explicit_ids_first(engine: OrderEngine) -> None:
    engine.replace([50, 20, 10])
    ids = engine.order.ids
    assert ids[:6] == [50, 20, 10, 1, 2, 3]
    assert sorted(ids) == list(range(1, SMALL_INITIAL + 1))
    _assert_reverse_index(engine)


def test_replace_keeps_prior_relative_order_for_remainder(engine: OrderEngine) -> None:
    engine.move(30, 1)
    engine.replace([2])
    assert engine.order.ids[:4] == [2, 30, 1, 3]


def test_replace_extends_to_highest_explicit_id(engine: OrderEngine) -> None:
    engine.replace([120, 5])
    assert engine.order.ids[:3] == [120, 5, 1]
    assert sorted(engine.order.ids) == list(range(1, 121))


@pytest.mark.parametrize(
    "order,field",
    [
        ([], "field"),
        ([0, 1], "invalidValues"),
        ([SMALL_CATALOG + 1], "invalidValues"),
        ([3, 4, 3], "duplicateIds"),
    ],
)
def test_replace_rejects_bad_sequences(engine: OrderEngine, order: list[int], field: str) -> None:
    with pytest.raises(InvalidInputError) as excinfo:
        engine.replace(order)
    assert field in excinfo.value.fields
    assert not engine.order.initialized


# ----------------------------------------------------------------------------
# Settings
# ----------------------------------------------------------------------------

def test_settings_before_any_request_has_no_order(engine: OrderEngine) -> None:
    view = engine.settings()
    assert view.custom_order is None
    assert view.selected_ids == []


def test_settings_order_is_capped(engine: OrderEngine) -> None:
    engine.set_selection([9, 3, 9])
    engine.replace([50, 20, 10])
    view = engine.settings()
    assert view.selected_ids == [9, 3]
    assert len(view.custom_order) == SMALL_CAP
    assert view.custom_order[:4] == [50, 20, 10, 1]


# ----------------------------------------------------------------------------
# Catalog
# ----------------------------------------------------------------------------

def test_catalog_lookup_is_by_id(engine: OrderEngine) -> None:
    catalog = engine.catalog
    assert len(catalog) == SMALL_CATALOG
    assert catalog.value_for(137) == "Item 137"
    assert 1 in catalog and SMALL_CATALOG in catalog
    assert 0 not in catalog and SMALL_CATALOG + 1 not in catalog and True not in catalog
    assert list(catalog.ids(start=198)) == [198, 199, 200]
