"""Route group exports."""

from . import health, operations, schedule, templates, visits

__all__ = ["health", "templates", "schedule", "visits", "operations"]
