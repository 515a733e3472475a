from __future__ import annotations

import pytest

from hourly_invoice.core.duration import duration_to_decimal_hours
from hourly_invoice.core.items import IdAllocator, LineItem, add_item, remove_item, update_item


def _items() -> list[LineItem]:
    return [
        LineItem(id="1", project_name="A", duration_text="1:00", rate_per_hour=10.0, line_total=10.0),
        LineItem(id="2", project_name="B", duration_text="2:00", rate_per_hour=20.0, line_total=40.0),
    ]


def test_update_duration_recomputes_total() -> None:
    items = _items()
    out = update_item(items, "1", "duration_text", "1:30")
    assert out[0].duration_text == "1:30"
    assert out[0].line_total == pytest.approx(15.0)


def test_update_rate_uses_post_update_values() -> None:
    items = update_item(_items(), "2", "duration_text", "0:30")
    items = update_item(items, "2", "rate_per_hour", 100.0)
    assert items[1].line_total == pytest.approx(50.0)


def test_update_keeps_untouched_items_by_identity() -> None:
    items = _items()
    out = update_item(items, "2", "rate_per_hour", 5.0)
    assert out is not items
    assert out[0] is items[0]
    assert out[1] is not items[1]


def test_update_project_name_does_not_touch_total() -> None:
    items = _items()
    out = update_item(items, "1", "project_name", "Renamed")
    assert out[0].project_name == "Renamed"
    assert out[0].line_total == items[0].line_total


def test_update_unknown_id_leaves_items_unchanged() -> None:
    items = _items()
    assert update_item(items, "nope", "rate_per_hour", 99.0) == items


@pytest.mark.parametrize("field", ["line_total", "id", "colour"])
def test_update_ignores_non_editable_fields(field) -> None:
    items = _items()
    assert update_item(items, "1", field, 123) == items


def test_line_total_invariant_after_edits() -> None:
    items = _items()
    edits = [("1", "duration_text", "abc:30"), ("2", "rate_per_hour", 7.5), ("1", "rate_per_hour", 3.0), ("2", "duration_text", "")]
    for item_id, field, value in edits:
        items = update_item(items, item_id, field, value)
        for it in items:
            assert it.line_total == pytest.approx(duration_to_decimal_hours(it.duration_text) * it.rate_per_hour)


def test_add_item_appends_empty_row() -> None:
    items = _items()
    out = add_item(items, IdAllocator.for_items(items))
    assert len(out) == 3
    new = out[-1]
    assert new.id not in {"1", "2"}
    assert (new.project_name, new.duration_text, new.rate_per_hour, new.line_total) == ("", "", 0.0, 0.0)


def test_add_item_ids_unique_over_many_additions() -> None:
    items = [LineItem(id="1")]
    allocator = IdAllocator.for_items(items)
    for _ in range(10_000):
        items = add_item(items, allocator)
    ids = [it.id for it in items]
    assert len(ids) == 10_001
    assert len(set(ids)) == len(ids)


def test_ids_are_never_reused_after_removal() -> None:
    items = [LineItem(id="1")]
    allocator = IdAllocator.for_items(items)
    items = add_item(items, allocator)
    removed_id = items[-1].id
    items = remove_item(items, removed_id)
    items = add_item(items, allocator)
    assert items[-1].id != removed_id


def test_allocator_skips_reserved_ids() -> None:
    allocator = IdAllocator(start=1, reserved=["2", "3"])
    assert [allocator.next_id() for _ in range(3)] == ["1", "4", "5"]


def test_allocator_seeded_from_timestamp_ids() -> None:
    items = [LineItem(id="1"), LineItem(id="1717171717171"), LineItem(id="x-7")]
    allocator = IdAllocator.for_items(items)
    assert allocator.next_id() == "1717171717172"


def test_remove_item() -> None:
    items = _items()
    out = remove_item(items, "1")
    assert len(out) == len(items) - 1
    assert all(it.id != "1" for it in out)


def test_remove_last_item_is_allowed() -> None:
    assert remove_item([LineItem(id="1")], "1") == []


def test_reloaded_allocator_only_avoids_ids_still_present() -> None:
    # Ids are unique per editing session; a fresh allocator seeded from a saved
    # draft knows nothing about rows removed before the save.
    items = [LineItem(id="1")]
    allocator = IdAllocator.for_items(items)
    items = add_item(items, allocator)
    items = add_item(items, allocator)
    items = remove_item(items, "3")
    assert [it.id for it in items] == ["1", "2"]

    reloaded = IdAllocator.for_items(items)
    assert reloaded.next_id() == "3"
    assert all(reloaded.next_id() not in {"1", "2"} for _ in range(100))
