from datetime import date

import pytest

from src.fieldops.errors import NotFoundError, StoreError, ValidationError
from src.fieldops.services.scheduling import (
    assign_template,
    get_assignment,
    list_assignments,
    unassign_template,
)

DAY = date(2026, 10, 19)


def _template_with_station(seed, customer: str = "c1", worker: str = "w1", name: str = "Template 1") -> str:
    template_id = seed.template(name)
    seed.station(template_id, customer, worker, scheduled_time="10:00")
    seed.service_point(customer)
    return template_id


def test_assign_creates_assignment_and_visits(store, seed):
    template_id = _template_with_station(seed)

    result = assign_template(store, DAY, template_id)

    assert result.assignment.date == DAY
    assert result.assignment.template_id == template_id
    assert len(result.expansion.visits) == 1
    assert result.expansion.points_created == 1
    assert result.replaced_template_id is None


def test_reassigning_the_same_template_keeps_one_assignment(store, seed):
    template_id = _template_with_station(seed)

    assign_template(store, DAY, template_id)
    second = assign_template(store, DAY, template_id)

    assert len(store.rows("work_schedules")) == 1
    assert second.expansion.visits == []
    assert len(store.rows("jobs")) == 1


def test_assigning_another_template_replaces_pending_visits(store, seed, at):
    old_id = _template_with_station(seed, "c1", "w1", "Old")
    new_id = _template_with_station(seed, "c2", "w2", "New")
    assign_template(store, DAY, old_id)
    done = seed.visit("w1", at(2026, 10, 19, 8), customer_id="c1", status="completed")

    result = assign_template(store, DAY, new_id)

    assert result.replaced_template_id == old_id
    assert result.removed_visits == 1
    assert get_assignment(store, DAY).template_id == new_id
    remaining = {(row["customer_id"], row["status"]) for row in store.rows("jobs")}
    assert remaining == {("c1", "completed"), ("c2", "pending")}
    assert done in {row["id"] for row in store.rows("jobs")}


def test_assign_rejects_unknown_template(store):
    with pytest.raises(NotFoundError):
        assign_template(store, DAY, "missing")
    with pytest.raises(ValidationError):
        assign_template(store, DAY, "")
    assert store.rows("work_schedules") == []


def test_failed_expansion_keeps_previous_assignment(store, seed):
    old_id = _template_with_station(seed, "c1", "w1", "Old")
    new_id = _template_with_station(seed, "c2", "w2", "New")
    assign_template(store, DAY, old_id)
    store.fail_on("insert", "jobs")

    with pytest.raises(StoreError):
        assign_template(store, DAY, new_id)

    assert get_assignment(store, DAY).template_id == old_id
    assert [(row["customer_id"], row["status"]) for row in store.rows("jobs")] == [("c1", "pending")]
    assert len(store.rows("job_service_points")) == 1


def test_unassign_removes_pending_visits_only(store, seed, at):
    template_id = _template_with_station(seed)
    assign_template(store, DAY, template_id)
    done = seed.visit("w1", at(2026, 10, 19, 11), customer_id="c1", status="completed")
    tomorrow = seed.visit("w1", at(2026, 10, 20, 10), customer_id="c1")

    result = unassign_template(store, DAY)

    assert result.assignment_removed
    assert result.template_id == template_id
    assert result.removed_visits == 1
    assert result.removed_points == 1
    assert get_assignment(store, DAY) is None
    assert {row["id"] for row in store.rows("jobs")} == {done, tomorrow}
    assert store.rows("job_service_points") == []


def test_unassign_without_assignment_is_a_no_op(store, seed, at):
    seed.visit("w1", at(2026, 10, 19, 10), customer_id="c1")

    result = unassign_template(store, DAY)

    assert not result.assignment_removed
    assert result.template_id is None
    assert len(store.rows("jobs")) == 1


def test_failed_unassign_restores_everything(store, seed):
    template_id = _template_with_station(seed)
    assign_template(store, DAY, template_id)
    store.fail_on("delete", "work_schedules")

    with pytest.raises(StoreError):
        unassign_template(store, DAY)

    assert get_assignment(store, DAY).template_id == template_id
    assert len(store.rows("jobs")) == 1
    assert len(store.rows("job_service_points")) == 1


def test_list_assignments_pairs_templates(store, seed):
    first = seed.template("Sunday")
    second = seed.template("Monday")
    seed.assignment(date(2026, 10, 18), first)
    seed.assignment(date(2026, 10, 19), second)
    seed.assignment(date(2026, 10, 25), first)

    entries = list_assignments(store, date(2026, 10, 18), date(2026, 10, 24))

    assert [(assignment.date.day, template.name) for assignment, template in entries] == [
        (18, "Sunday"),
        (19, "Monday"),
    ]
    with pytest.raises(ValidationError):
        list_assignments(store, date(2026, 10, 24), date(2026, 10, 18))


def test_unassign_template_without_bound_stations(store, seed, at):
    empty_id = seed.template("Empty")
    placeholder_id = seed.template("Placeholder")
    seed.station(placeholder_id, "c1", None)
    other_day = date(2026, 10, 20)
    assign_template(store, DAY, empty_id)
    assign_template(store, other_day, placeholder_id)
    visit_id = seed.visit("w1", at(2026, 10, 20, 9), customer_id="c1")

    for day, template_id in ((DAY, empty_id), (other_day, placeholder_id)):
        result = unassign_template(store, day)

        assert result.assignment_removed
        assert result.template_id == template_id
        assert (result.removed_visits, result.removed_points) == (0, 0)
        assert get_assignment(store, day) is None

    assert [row["id"] for row in store.rows("jobs")] == [visit_id]
