"""Refill quantity resolution for visit points."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ...data.visits_repository import fetch_service_points, fetch_visit, fetch_visit_points
from ...db.store import RecordStore
from ...models.domain import ServicePoint, VisitPoint


def resolve_quantity(visit_point: VisitPoint, service_point: ServicePoint) -> float:
    """Return the override when one is set (zero included), else the live default."""
    if visit_point.custom_refill_amount is not None:
        return visit_point.custom_refill_amount
    return service_point.refill_amount


@dataclass(slots=True)
class ResolvedPoint:
    visit_point_id: str
    service_point_id: str
    device_type: str
    scent_type: Optional[str]
    default_amount: float
    override_amount: Optional[float]
    quantity: float
    image_url: Optional[str] = None

    @property
    def is_overridden(self) -> bool:
        return self.override_amount is not None and self.override_amount != self.default_amount


def resolve_points(
    visit_points: list[VisitPoint], service_points: dict[str, ServicePoint]
) -> list[ResolvedPoint]:
    resolved: list[ResolvedPoint] = []
    for point in visit_points:
        service_point = service_points.get(point.service_point_id)
        if service_point is None:
            # the service point was deleted after the visit was generated
            continue
        resolved.append(
            ResolvedPoint(
                visit_point_id=point.id,
                service_point_id=service_point.id,
                device_type=service_point.device_type,
                scent_type=service_point.scent_type,
                default_amount=service_point.refill_amount,
                override_amount=point.custom_refill_amount,
                quantity=resolve_quantity(point, service_point),
                image_url=point.image_url,
            )
        )
    return resolved


def resolve_visit_quantities(store: RecordStore, visit_id: str) -> list[ResolvedPoint]:
    """Resolved refill quantities for every point of one visit."""
    fetch_visit(store, visit_id)
    points = fetch_visit_points(store, [visit_id])
    service_points = fetch_service_points(store, (point.service_point_id for point in points))
    return resolve_points(points, service_points)
