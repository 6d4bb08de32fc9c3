"""Executor abstraction for queries run against the action store."""

from __future__ import annotations

from typing import Protocol, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

T_co = TypeVar("T_co", covariant=True)


class JobExecutor(Protocol[T_co]):
    """A named unit of work executed inside one database session."""

    @property
    def name(self) -> str:
        """Name used in log messages."""

    async def execute(self, session: AsyncSession) -> T_co:
        """Run against ``session`` and return the result."""
