"""Deterministic NIV failure risk engine."""

from .orchestrator import assess

__all__ = ["assess"]
