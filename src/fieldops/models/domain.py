"""Domain models for templates, schedules and visits."""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Literal, Optional

VisitStatus = Literal["pending", "completed"]

PENDING: VisitStatus = "pending"
COMPLETED: VisitStatus = "completed"


@dataclass(slots=True)
class Template:
    """A reusable, named set of visit slots."""

    id: str
    name: str
    created_at: Optional[datetime] = None


@dataclass(slots=True)
class Station:
    """One slot of a template: customer, worker and time of day."""

    id: str
    template_id: str
    customer_id: Optional[str]
    worker_id: Optional[str]
    order: int
    scheduled_time: Optional[str] = None
    created_at: Optional[datetime] = None

    @property
    def is_bound(self) -> bool:
        return bool(self.customer_id) and bool(self.worker_id)


@dataclass(slots=True)
class ServicePoint:
    """A dispenser at a customer site with its default refill quantity."""

    id: str
    customer_id: str
    device_type: str
    scent_type: Optional[str]
    refill_amount: float


@dataclass(slots=True)
class ScheduleAssignment:
    id: str
    template_id: str
    date: date


@dataclass(slots=True)
class Visit:
    """A dated service call (stored in the ``jobs`` table)."""

    id: str
    worker_id: str
    date: datetime
    status: VisitStatus
    customer_id: Optional[str] = None
    one_time_customer_id: Optional[str] = None
    order_number: Optional[int] = None
    notes: Optional[str] = None
    station_id: Optional[str] = None
    scheduled_for: Optional[date] = None

    @property
    def is_pending(self) -> bool:
        return self.status == PENDING


@dataclass(slots=True)
class VisitPoint:
    """One refill task of a visit (stored in ``job_service_points``)."""

    id: str
    job_id: str
    service_point_id: str
    custom_refill_amount: Optional[float] = None
    image_url: Optional[str] = None


@dataclass(slots=True)
class InstallationVisit:
    id: str
    worker_id: str
    date: datetime
    device_types: list[str] = field(default_factory=list)


@dataclass(slots=True)
class SpecialVisit:
    id: str
    worker_id: str
    date: datetime
    job_type: str
    battery_type: Optional[str] = None
