from datetime import date

import pytest

from src.fieldops.errors import ConflictError, ValidationError
from src.fieldops.services import visits as visit_service


def test_manual_visit_override_only_when_quantity_differs(store, seed, at):
    same = seed.service_point("c1", "Amber", 100)
    changed = seed.service_point("c1", "Oud", 100)
    untouched = seed.service_point("c1", "Rose", 60)

    visit, points = visit_service.create_manual_visit(
        store,
        worker_id="w1",
        scheduled_at=at(2026, 10, 19, 11),
        customer_id="c1",
        quantities={same: 100, changed: 150},
    )

    assert visit.status == "pending"
    assert visit.station_id is None
    overrides = {point.service_point_id: point.custom_refill_amount for point in points}
    assert overrides == {same: None, changed: 150, untouched: None}


def test_manual_visit_for_one_time_customer_has_no_points(store, seed, at):
    seed.service_point("c1")

    visit, points = visit_service.create_manual_visit(
        store, worker_id="w1", scheduled_at=at(2026, 10, 19, 11), one_time_customer_id="otc-1"
    )

    assert visit.one_time_customer_id == "otc-1"
    assert points == []


def test_manual_visit_validation(store, seed, at):
    when = at(2026, 10, 19, 11)
    point = seed.service_point("c1")

    with pytest.raises(ValidationError):
        visit_service.create_manual_visit(store, worker_id="w1", scheduled_at=when)
    with pytest.raises(ValidationError):
        visit_service.create_manual_visit(
            store, worker_id="w1", scheduled_at=when, customer_id="c1", one_time_customer_id="otc-1"
        )
    with pytest.raises(ValidationError):
        visit_service.create_manual_visit(
            store, worker_id="w1", scheduled_at=when, customer_id="c1", quantities={point: -1}
        )
    assert store.rows("jobs") == []


def test_manual_visit_with_foreign_point_is_rolled_back(store, seed, at):
    seed.service_point("c1")
    foreign = seed.service_point("c2")

    with pytest.raises(ValidationError):
        visit_service.create_manual_visit(
            store, worker_id="w1", scheduled_at=at(2026, 10, 19, 11), customer_id="c1", quantities={foreign: 5}
        )

    assert store.rows("jobs") == []


def test_completion_is_terminal(store, seed, at):
    visit_id = seed.visit("w1", at(2026, 10, 19, 9))

    assert visit_service.complete_visit(store, visit_id).status == "completed"
    assert visit_service.complete_visit(store, visit_id).status == "completed"


def test_override_rules(store, seed, at):
    visit_id = seed.visit("w1", at(2026, 10, 19, 9), customer_id="c1")
    point_id = seed.visit_point(visit_id, seed.service_point("c1", "Amber", 100))

    assert visit_service.set_point_override(store, point_id, 0).custom_refill_amount == 0
    assert visit_service.set_point_override(store, point_id, None).custom_refill_amount is None
    with pytest.raises(ValidationError):
        visit_service.set_point_override(store, point_id, -5)

    visit_service.complete_visit(store, visit_id)
    with pytest.raises(ConflictError):
        visit_service.set_point_override(store, point_id, 120)


def test_reschedule_keeps_the_calendar_day(store, seed, at, tz):
    visit_id = seed.visit("w1", at(2026, 10, 19, 9))

    moved = visit_service.reschedule_visit_time(store, visit_id, "16:45")

    assert moved.date.astimezone(tz) == at(2026, 10, 19, 16, 45)


def test_reschedule_rejects_completed_visit(store, seed, at):
    visit_id = seed.visit("w1", at(2026, 10, 19, 9), status="completed")

    with pytest.raises(ConflictError):
        visit_service.reschedule_visit_time(store, visit_id, "10:00")


def test_day_listing_puts_numbered_visits_first(store, seed, at):
    late = seed.visit("w1", at(2026, 10, 19, 15))
    early = seed.visit("w1", at(2026, 10, 19, 8))
    numbered = seed.visit("w1", at(2026, 10, 19, 17))
    for row in store.tables["jobs"]:
        if row["id"] == numbered:
            row["order_number"] = 1
    seed.visit("w2", at(2026, 10, 19, 7))

    visits = visit_service.list_day_visits(store, date(2026, 10, 19), worker_id="w1")

    assert [visit.id for visit in visits] == [numbered, early, late]


def test_point_image_is_recorded_while_pending(store, seed, at):
    visit_id = seed.visit("w1", at(2026, 10, 19, 9), customer_id="c1")
    point_id = seed.visit_point(visit_id, seed.service_point("c1"))

    point = visit_service.record_point_image(store, point_id, " job-1-sp-1.jpg ")

    assert point.image_url == "job-1-sp-1.jpg"
    with pytest.raises(ValidationError):
        visit_service.record_point_image(store, point_id, "  ")

    visit_service.complete_visit(store, visit_id)
    with pytest.raises(ConflictError):
        visit_service.record_point_image(store, point_id, "job-1-sp-1-retake.jpg")
    assert store.rows("job_service_points")[0]["image_url"] == "job-1-sp-1.jpg"
