"""Executors that run named queries against the action store."""

from .actions_subset import (
    CoordJobGetActionsCount,
    CoordJobGetActionsSubset,
    normalize_status_filters,
    parse_status_filter,
)
from .base import JobExecutor

__all__ = [
    "CoordJobGetActionsCount",
    "CoordJobGetActionsSubset",
    "JobExecutor",
    "normalize_status_filters",
    "parse_status_filter",
]
