"""Tests for the business rules module."""
from __future__ import annotations

import re
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from zoneinfo import ZoneInfo

import pytest
from conftest import make_style, make_stylist, make_user

from braids.errors import Conflict, NotFound
from braids.extensions import db
from braids.models import Appointment, Review
from braids.rules import (OrderLine, ReviewTarget, compute_order_totals, day_bounds,
                          ensure_no_appointment_conflict, ensure_single_review,
                          generate_order_number, review_stats, stylist_availability, to_storage)


def test_order_totals_with_free_shipping() -> None:
    totals = compute_order_totals([
        OrderLine("a", 2, Decimal("25.99")),
        OrderLine("b", 1, Decimal("15.50")),
    ])

    assert totals.subtotal == Decimal("67.48")
    assert totals.tax_amount == Decimal("6.75")
    assert totals.shipping_amount == Decimal("0.00")
    assert totals.total_amount == Decimal("74.23")


def test_order_totals_with_flat_shipping() -> None:
    totals = compute_order_totals([OrderLine("a", 1, Decimal("15.50"))])

    assert totals.subtotal == Decimal("15.50")
    assert totals.tax_amount == Decimal("1.55")
    assert totals.shipping_amount == Decimal("10.00")
    assert totals.total_amount == Decimal("27.05")


def test_shipping_is_charged_at_exactly_fifty() -> None:
    totals = compute_order_totals([OrderLine("a", 2, Decimal("25.00"))])

    assert totals.shipping_amount == Decimal("10.00")
    assert totals.total_amount == Decimal("65.00")


def test_order_totals_refuse_repeated_products() -> None:
    with pytest.raises(ValueError):
        compute_order_totals([OrderLine("a", 1, Decimal("1.00")), OrderLine("a", 2, Decimal("1.00"))])


def test_order_number_format() -> None:
    now = datetime(2025, 3, 10, 12, 0, tzinfo=timezone.utc)

    number = generate_order_number(now)

    assert number == f"ORD-2025-{str(int(now.timestamp() * 1000))[-6:]}"
    assert re.fullmatch(r"ORD-\d{4}-\d{6}", generate_order_number())


def test_day_bounds_in_business_timezone() -> None:
    start, end = day_bounds(date(2025, 3, 11), ZoneInfo("America/New_York"))

    assert start == datetime(2025, 3, 11, 4, 0)
    assert end == datetime(2025, 3, 12, 4, 0)


def _book(app, stylist_id, when, status="SCHEDULED"):
    user_id = make_user(app, email=f"{status.lower()}-{when.hour}-{when.minute}@example.com")
    style_id = make_style(app)
    with app.app_context():
        db.session.add(Appointment(
            user_id=user_id,
            stylist_id=stylist_id,
            style_id=style_id,
            appointment_date=to_storage(when),
            status=status,
        ))
        db.session.commit()


def test_conflict_is_exact_timestamp_only(app) -> None:
    stylist_id = make_stylist(app)
    other_stylist_id = make_stylist(app, name="Lucia Mendes")
    when = datetime(2025, 3, 10, 10, 0, tzinfo=timezone.utc)
    _book(app, stylist_id, when)

    with app.app_context():
        with pytest.raises(Conflict):
            ensure_no_appointment_conflict(stylist_id, when)

        # Overlapping but not identical start times are not treated as a conflict.
        ensure_no_appointment_conflict(stylist_id, when + timedelta(minutes=30))
        ensure_no_appointment_conflict(other_stylist_id, when)


def test_cancelled_appointments_do_not_block_the_slot(app) -> None:
    stylist_id = make_stylist(app)
    when = datetime(2025, 3, 10, 11, 0, tzinfo=timezone.utc)
    _book(app, stylist_id, when, status="CANCELLED")

    with app.app_context():
        ensure_no_appointment_conflict(stylist_id, when)


def test_availability_marks_booked_and_past_slots(app) -> None:
    stylist_id = make_stylist(app)
    _book(app, stylist_id, datetime(2025, 3, 10, 14, 0, tzinfo=timezone.utc))
    now = datetime(2025, 3, 10, 9, 30, tzinfo=timezone.utc)

    with app.app_context():
        slots = stylist_availability(stylist_id, date(2025, 3, 10), timezone.utc, now=now)

    assert [slot["time"] for slot in slots] == [f"{hour:02d}:00" for hour in range(8, 18)]
    available = {slot["time"]: slot["available"] for slot in slots}
    assert available["10:00"] is False
    assert available["11:00"] is True
    assert available["14:00"] is False
    assert available["17:00"] is True


def test_availability_is_empty_on_sunday(app) -> None:
    stylist_id = make_stylist(app)
    with app.app_context():
        assert stylist_availability(stylist_id, date(2025, 3, 16), timezone.utc) == []


def test_review_target_must_exist(app) -> None:
    with app.app_context():
        with pytest.raises(NotFound):
            ReviewTarget("STYLE", "6f1c2d3e-4b5a-4c6d-8e9f-0a1b2c3d4e5f").resolve()


def test_review_stats_count_verified_reviews_only(app) -> None:
    stylist_id = make_stylist(app)
    target = ReviewTarget("STYLIST", stylist_id)
    ratings = [(5, True), (4, True), (4, True), (1, False)]
    user_ids = [make_user(app, email=f"reviewer{index}@example.com") for index in range(len(ratings))]
    with app.app_context():
        for user_id, (rating, verified) in zip(user_ids, ratings):
            db.session.add(Review(
                user_id=user_id,
                reviewable_type="STYLIST",
                reviewable_id=stylist_id,
                rating=rating,
                comment="Neat and quick braids",
                is_verified=verified,
            ))
        db.session.commit()

        stats = review_stats(target)

        with pytest.raises(Conflict):
            ensure_single_review(user_id, target)

    assert stats["total_reviews"] == 3
    assert stats["average_rating"] == 4.3
    assert stats["rating_distribution"] == {"1": 0, "2": 0, "3": 0, "4": 2, "5": 1}


def test_review_stats_without_reviews(app) -> None:
    with app.app_context():
        stats = review_stats(ReviewTarget("PRODUCT", "6f1c2d3e-4b5a-4c6d-8e9f-0a1b2c3d4e5f"))

    assert stats["total_reviews"] == 0
    assert stats["average_rating"] == 0.0
