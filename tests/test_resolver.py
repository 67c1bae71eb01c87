import pytest

from src.fieldops.errors import NotFoundError
from src.fieldops.models.domain import ServicePoint, VisitPoint
from src.fieldops.services.refill import resolve_points, resolve_quantity, resolve_visit_quantities


def _service_point(amount: float = 100) -> ServicePoint:
    return ServicePoint(id="sp1", customer_id="c1", device_type="Z30", scent_type="Amber", refill_amount=amount)


def _visit_point(override: float | None) -> VisitPoint:
    return VisitPoint(id="vp1", job_id="j1", service_point_id="sp1", custom_refill_amount=override)


def test_override_wins_over_default():
    assert resolve_quantity(_visit_point(150), _service_point(100)) == 150


def test_zero_override_is_respected():
    assert resolve_quantity(_visit_point(0), _service_point(100)) == 0


def test_missing_override_reads_the_live_default():
    point = _visit_point(None)

    assert resolve_quantity(point, _service_point(100)) == 100
    assert resolve_quantity(point, _service_point(120)) == 120


def test_resolve_points_skips_deleted_service_points():
    points = [
        _visit_point(None),
        VisitPoint(id="vp2", job_id="j1", service_point_id="gone", custom_refill_amount=30),
    ]

    resolved = resolve_points(points, {"sp1": _service_point(100)})

    assert [entry.visit_point_id for entry in resolved] == ["vp1"]
    assert resolved[0].quantity == 100
    assert not resolved[0].is_overridden


def test_resolve_visit_quantities_follows_default_changes(store, seed, at):
    visit_id = seed.visit("w1", at(2026, 10, 19, 9), customer_id="c1")
    live = seed.service_point("c1", "Amber", 100)
    frozen = seed.service_point("c1", "Oud", 200)
    seed.visit_point(visit_id, live)
    seed.visit_point(visit_id, frozen, override=200)

    for row in store.tables["service_points"]:
        row["refill_amount"] = 500

    quantities = {entry.service_point_id: entry.quantity for entry in resolve_visit_quantities(store, visit_id)}

    assert quantities == {live: 500, frozen: 200}


def test_resolve_visit_quantities_unknown_visit(store):
    with pytest.raises(NotFoundError):
        resolve_visit_quantities(store, "missing")
