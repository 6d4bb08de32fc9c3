"""Load a page of coordinator actions for a coordinator job."""

from __future__ import annotations

import logging
from typing import Iterable

from sqlalchemy.ext.asyncio import AsyncSession

from ..db.models import CoordinatorActionStatus
from ..db.queries import GET_ACTIONS_FOR_COORD_JOB_ORDER_BY_NOMINAL_TIME, named_query
from ..errors import QueryExecutionError
from ..views import CoordinatorActionView, project_action

logger = logging.getLogger(__name__)

DEFAULT_LENGTH = 50

_STATUS_VALUES = frozenset(s.value for s in CoordinatorActionStatus)


def normalize_status_filters(
    status_filters: Iterable[str], validate: bool = True
) -> list[str]:
    """Return the filters without duplicates, in order of first appearance.

    Raises:
        ValueError: If a filter is not a string, or ``validate`` is set and a
            filter is not a known :class:`CoordinatorActionStatus`.
    """
    statuses: list[str] = []
    for value in status_filters:
        if isinstance(value, CoordinatorActionStatus):
            value = value.value
        if not isinstance(value, str):
            raise ValueError(f"Status filter must be a string, got {value!r}")
        if validate and value not in _STATUS_VALUES:
            raise ValueError(f"Unknown coordinator action status: {value!r}")
        if value not in statuses:
            statuses.append(value)
    return statuses


def parse_status_filter(text: str) -> list[str]:
    """Parse a filter string such as ``status=RUNNING;status=KILLED``.

    Pairs are separated by ``;``; a pair may also carry several
    comma-separated values. Only the ``status`` key is understood.
    """
    statuses: list[str] = []
    try:
        for pair in text.split(";"):
            pair = pair.strip()
            if not pair:
                continue
            key, sep, values = pair.partition("=")
            if not sep:
                raise ValueError(f"Filter entry must be key=value, got {pair!r}")
            if key.strip().lower() != "status":
                raise ValueError(f"Unsupported filter key: {key.strip()!r}")
            pair_values = [v.strip().upper() for v in values.split(",") if v.strip()]
            if not pair_values:
                raise ValueError(f"Filter entry has no status value: {pair!r}")
            statuses.extend(pair_values)
        return normalize_status_filters(statuses)
    except ValueError as exc:
        raise QueryExecutionError(exc) from exc


class CoordJobGetActionsSubset:
    """Fetch actions ``start`` .. ``start + length - 1`` of a coordinator job.

    Actions are ordered by nominal time. ``start`` is 1-based. When
    ``status_filters`` is non-empty only actions in one of those statuses are
    counted and returned.
    """

    def __init__(
        self,
        job_id: str,
        status_filters: Iterable[str] = (),
        start: int = 1,
        length: int = DEFAULT_LENGTH,
        validate_status: bool = True,
    ) -> None:
        self.job_id = job_id
        self.status_filters = status_filters
        self.start = start
        self.length = length
        self.validate_status = validate_status

    @property
    def name(self) -> str:
        return "CoordJobGetActionsSubset"

    def _check_arguments(self) -> None:
        if self.job_id is None:
            raise ValueError("job_id cannot be None")
        if self.status_filters is None:
            raise ValueError("status_filters cannot be None")
        if isinstance(self.status_filters, str):
            raise ValueError("status_filters must be a collection of statuses")
        if isinstance(self.start, bool) or not isinstance(self.start, int):
            raise ValueError(f"start must be an integer, got {self.start!r}")
        if isinstance(self.length, bool) or not isinstance(self.length, int):
            raise ValueError(f"length must be an integer, got {self.length!r}")
        if self.start < 1:
            raise ValueError(f"start must be >= 1, got {self.start}")
        if self.length < 0:
            raise ValueError(f"length must be >= 0, got {self.length}")

    async def execute(self, session: AsyncSession) -> list[CoordinatorActionView]:
        try:
            self._check_arguments()
            statuses = normalize_status_filters(
                self.status_filters, validate=self.validate_status
            )
            if self.length == 0:
                return []
            query = named_query(
                GET_ACTIONS_FOR_COORD_JOB_ORDER_BY_NOMINAL_TIME, job_id=self.job_id
            ).with_status(statuses)
            logger.debug(f"Running {query.name} for job_id={self.job_id}")
            result = await session.execute(
                query.statement(offset=self.start - 1, limit=self.length)
            )
            actions = [project_action(a) for a in result.scalars().all()]
        except Exception as exc:
            logger.error(f"{self.name} failed for job_id={self.job_id}: {exc}")
            raise QueryExecutionError(exc) from exc

        logger.info(
            f"{self.name} returned {len(actions)} action(s) for job_id={self.job_id} "
            f"(start={self.start}, length={self.length}, statuses={statuses or 'any'})"
        )
        return actions


class CoordJobGetActionsCount:
    """Count a coordinator job's actions, optionally restricted by status."""

    def __init__(
        self,
        job_id: str,
        status_filters: Iterable[str] = (),
        validate_status: bool = True,
    ) -> None:
        self.job_id = job_id
        self.status_filters = status_filters
        self.validate_status = validate_status

    @property
    def name(self) -> str:
        return "CoordJobGetActionsCount"

    async def execute(self, session: AsyncSession) -> int:
        try:
            if self.job_id is None:
                raise ValueError("job_id cannot be None")
            statuses = normalize_status_filters(
                self.status_filters, validate=self.validate_status
            )
            query = named_query(
                GET_ACTIONS_FOR_COORD_JOB_ORDER_BY_NOMINAL_TIME, job_id=self.job_id
            ).with_status(statuses)
            result = await session.execute(query.count_statement())
            return int(result.scalar_one())
        except Exception as exc:
            logger.error(f"{self.name} failed for job_id={self.job_id}: {exc}")
            raise QueryExecutionError(exc) from exc
