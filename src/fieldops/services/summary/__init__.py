"""Daily aggregation."""

from .aggregation import DailySummary, daily_summary

__all__ = ["DailySummary", "daily_summary"]
