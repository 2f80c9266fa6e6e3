"""Tests for double-booking and turnover detection."""

from itertools import combinations

from conftest import make_booking

from revpilot.modules.conflicts.detector import ConflictDetector, ConflictKind


def test_overlap_reported_once():
    bookings = [
        make_booking("X", "2024-01-01", "2024-01-05", property_id="P"),
        make_booking("Y", "2024-01-04", "2024-01-08", property_id="P"),
    ]
    [conflict] = ConflictDetector().detect(bookings, "P")
    assert conflict.kind is ConflictKind.OVERLAP
    assert {conflict.booking_a.id, conflict.booking_b.id} == {"X", "Y"}
    assert conflict.gap_hours is None
    assert "X" in conflict.detail and "Y" in conflict.detail


def test_same_day_turnover_is_short_gap():
    bookings = [
        make_booking("A", "2024-01-01", "2024-01-05", property_id="P2"),
        make_booking("B", "2024-01-05", "2024-01-06", property_id="P2"),
    ]
    [conflict] = ConflictDetector().detect(bookings, "P2")
    assert conflict.kind is ConflictKind.SHORT_GAP
    assert conflict.gap_hours == 0


def test_two_day_gap_is_fine():
    bookings = [
        make_booking("A", "2024-01-01", "2024-01-05", property_id="P3"),
        make_booking("B", "2024-01-07", "2024-01-10", property_id="P3"),
    ]
    assert ConflictDetector().detect(bookings, "P3") == []


def test_one_day_gap_meets_default_threshold():
    bookings = [
        make_booking("A", "2024-01-01", "2024-01-05"),
        make_booking("B", "2024-01-06", "2024-01-10"),
    ]
    assert ConflictDetector().detect(bookings, "P1") == []


def test_threshold_is_configurable():
    bookings = [
        make_booking("A", "2024-01-01", "2024-01-05"),
        make_booking("B", "2024-01-07", "2024-01-10"),
    ]
    [conflict] = ConflictDetector(min_turnover_hours=72).detect(bookings, "P1")
    assert conflict.kind is ConflictKind.SHORT_GAP
    assert conflict.gap_hours == 48


def test_cancelled_and_foreign_bookings_ignored():
    bookings = [
        make_booking("A", "2024-01-01", "2024-01-05"),
        make_booking("B", "2024-01-03", "2024-01-08", status="cancelled"),
        make_booking("C", "2024-01-03", "2024-01-08", property_id="OTHER"),
    ]
    assert ConflictDetector().detect(bookings, "P1") == []


def test_input_order_does_not_matter():
    bookings = [
        make_booking("Y", "2024-01-04", "2024-01-08"),
        make_booking("X", "2024-01-01", "2024-01-05"),
    ]
    [conflict] = ConflictDetector().detect(bookings, "P1")
    assert conflict.booking_a.id == "X"
    assert conflict.booking_b.id == "Y"


def _overlaps(a, b) -> bool:
    return a.check_in < b.check_out and b.check_in < a.check_out


def test_three_way_overlap_surfaces_every_cluster():
    scenarios = [
        [
            make_booking("A", "2024-01-01", "2024-01-10"),
            make_booking("B", "2024-01-02", "2024-01-04"),
            make_booking("C", "2024-01-05", "2024-01-08"),
        ],
        [
            make_booking("A", "2024-01-01", "2024-01-05"),
            make_booking("B", "2024-01-02", "2024-01-03"),
            make_booking("C", "2024-01-04", "2024-01-06"),
        ],
        [
            make_booking("A", "2024-01-01", "2024-01-06"),
            make_booking("B", "2024-01-03", "2024-01-09"),
            make_booking("C", "2024-01-05", "2024-01-12"),
        ],
    ]
    for bookings in scenarios:
        conflicts = ConflictDetector().detect(bookings, "P1")
        flagged = {
            booking.id
            for c in conflicts if c.kind is ConflictKind.OVERLAP
            for booking in (c.booking_a, c.booking_b)
        }
        for a, b in combinations(bookings, 2):
            if _overlaps(a, b):
                assert a.id in flagged or b.id in flagged


def test_detect_all_orders_by_property():
    bookings = [
        make_booking("A", "2024-01-01", "2024-01-05", property_id="P2"),
        make_booking("B", "2024-01-04", "2024-01-06", property_id="P2"),
        make_booking("C", "2024-01-01", "2024-01-05", property_id="P1"),
        make_booking("D", "2024-01-05", "2024-01-06", property_id="P1"),
    ]
    conflicts = ConflictDetector().detect_all(bookings)
    assert [(c.property_id, c.kind) for c in conflicts] == [
        ("P1", ConflictKind.SHORT_GAP),
        ("P2", ConflictKind.OVERLAP),
    ]
