"""Named, structured queries over the coordinator action table.

Queries are kept as separate predicate and ordering components and only
rendered into a SQL statement by SQLAlchemy, so extra predicates can be
added without touching the ORDER BY clause and every value is bound.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Iterable, Optional

from sqlalchemy import Select, and_, func, select
from sqlmodel import col

from .models import CoordinatorAction

GET_ACTIONS_FOR_COORD_JOB_ORDER_BY_NOMINAL_TIME = (
    "GET_ACTIONS_FOR_COORD_JOB_ORDER_BY_NOMINAL_TIME"
)


@dataclass(frozen=True)
class ActionQuery:
    """Predicates and ordering for a ``SELECT`` over coordinator actions."""

    name: str
    predicates: tuple[Any, ...] = ()
    ordering: tuple[Any, ...] = ()

    def where(self, *clauses: Any) -> ActionQuery:
        """Return a copy with ``clauses`` ANDed onto the existing predicates."""
        return ActionQuery(self.name, self.predicates + clauses, self.ordering)

    def with_status(self, statuses: Iterable[str]) -> ActionQuery:
        """Restrict to actions whose status is one of ``statuses``."""
        values = list(statuses)
        if not values:
            return self
        return self.where(col(CoordinatorAction.status).in_(values))

    def statement(
        self, offset: Optional[int] = None, limit: Optional[int] = None
    ) -> Select:
        stmt = select(CoordinatorAction)
        if self.predicates:
            stmt = stmt.where(and_(*self.predicates))
        stmt = stmt.order_by(*self.ordering)
        if offset:
            stmt = stmt.offset(offset)
        if limit is not None:
            stmt = stmt.limit(limit)
        return stmt

    def count_statement(self) -> Select:
        stmt = select(func.count()).select_from(CoordinatorAction)
        if self.predicates:
            stmt = stmt.where(and_(*self.predicates))
        return stmt


def _actions_for_job_by_nominal_time(job_id: str) -> ActionQuery:
    return ActionQuery(
        name=GET_ACTIONS_FOR_COORD_JOB_ORDER_BY_NOMINAL_TIME,
        predicates=(col(CoordinatorAction.job_id) == job_id,),
        ordering=(
            col(CoordinatorAction.nominal_time).asc(),
            col(CoordinatorAction.action_number).asc(),
        ),
    )


NAMED_QUERIES: dict[str, Callable[..., ActionQuery]] = {
    GET_ACTIONS_FOR_COORD_JOB_ORDER_BY_NOMINAL_TIME: _actions_for_job_by_nominal_time,
}


def named_query(name: str, **params: Any) -> ActionQuery:
    """Build the registered query ``name`` bound to ``params``."""
    try:
        factory = NAMED_QUERIES[name]
    except KeyError:
        raise ValueError(f"Unknown named query: {name}") from None
    return factory(**params)
