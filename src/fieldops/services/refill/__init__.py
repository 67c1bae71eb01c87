"""Refill override resolution."""

from .resolver import ResolvedPoint, resolve_points, resolve_quantity, resolve_visit_quantities

__all__ = ["ResolvedPoint", "resolve_points", "resolve_quantity", "resolve_visit_quantities"]
