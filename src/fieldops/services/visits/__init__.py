"""Visit operations."""

from .service import (
    complete_visit,
    create_manual_visit,
    list_day_visits,
    record_point_image,
    reschedule_visit_time,
    set_point_override,
)

__all__ = [
    "complete_visit",
    "create_manual_visit",
    "list_day_visits",
    "record_point_image",
    "reschedule_visit_time",
    "set_point_override",
]
