from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Iterable, Optional, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlmodel import SQLModel

from ..config import QueryConfig
from ..errors import QueryExecutionError
from ..executor.actions_subset import CoordJobGetActionsCount, CoordJobGetActionsSubset
from ..executor.base import JobExecutor
from ..views import CoordinatorActionView
from .models import CoordinatorAction, CoordinatorJob

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CoordinatorDB:
    """Async database helper for coordinator jobs and their actions."""

    def __init__(
        self,
        database_url: str,
        echo: bool = False,
        query_config: Optional[QueryConfig] = None,
    ) -> None:
        connect_args = {}
        if database_url.startswith("sqlite"):
            connect_args["check_same_thread"] = False
        self.engine = create_async_engine(
            database_url, echo=echo, future=True, connect_args=connect_args
        )
        self.query_config = query_config or QueryConfig()

    async def init_db(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)

    async def dispose(self) -> None:
        await self.engine.dispose()

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        async with AsyncSession(self.engine, expire_on_commit=False) as session:
            yield session

    @asynccontextmanager
    async def query_session(self) -> AsyncIterator[AsyncSession]:
        """Session for reads; any failure, including on open or close, is E0603."""
        try:
            async with self.session() as session:
                yield session
        except QueryExecutionError:
            raise
        except Exception as exc:
            logger.error(f"Query session failed: {exc}")
            raise QueryExecutionError(exc) from exc

    async def execute(self, executor: JobExecutor[T]) -> T:
        """Run ``executor`` inside a fresh session."""
        logger.debug(f"Executing {executor.name}")
        async with self.query_session() as session:
            return await executor.execute(session)

    # ------------------------------------------------------------------
    # Writes used by the coordinator engine and by tests
    async def add_job(self, job_id: str, app_name: str, status: str = "PREP") -> CoordinatorJob:
        job = CoordinatorJob(id=job_id, app_name=app_name, status=status)
        async with self.session() as session:
            session.add(job)
            await session.commit()
            await session.refresh(job)
        return job

    async def add_actions(self, actions: Iterable[CoordinatorAction]) -> None:
        async with self.session() as session:
            session.add_all(list(actions))
            await session.commit()

    async def update_action_status(self, action_id: str, status: str) -> None:
        async with self.session() as session:
            action = await session.get(CoordinatorAction, action_id)
            if action is None:
                return
            action.status = status
            await session.commit()

    # ------------------------------------------------------------------
    # Reads
    def _subset(
        self,
        job_id: str,
        status_filters: Iterable[str],
        start: int,
        length: Optional[int],
    ) -> CoordJobGetActionsSubset:
        if length is None:
            length = self.query_config.default_length
        max_length = self.query_config.max_length
        if max_length is not None and isinstance(length, int) and length > max_length:
            err = ValueError(f"length {length} exceeds the maximum of {max_length}")
            raise QueryExecutionError(err) from err
        return CoordJobGetActionsSubset(
            job_id,
            status_filters,
            start=start,
            length=length,
            validate_status=self.query_config.validate_status,
        )

    async def fetch_actions(
        self,
        job_id: str,
        status_filters: Iterable[str] = (),
        start: int = 1,
        length: Optional[int] = None,
    ) -> list[CoordinatorActionView]:
        """Return a page of ``job_id``'s actions ordered by nominal time.

        Raises:
            QueryExecutionError: If the page is invalid, a filter is unknown
                or the store fails.
        """
        return await self.execute(self._subset(job_id, status_filters, start, length))

    async def count_actions(
        self, job_id: str, status_filters: Iterable[str] = ()
    ) -> int:
        """Return how many of ``job_id``'s actions match ``status_filters``."""
        return await self.execute(
            CoordJobGetActionsCount(
                job_id, status_filters, validate_status=self.query_config.validate_status
            )
        )

    async def fetch_page(
        self,
        job_id: str,
        status_filters: Iterable[str] = (),
        start: int = 1,
        length: Optional[int] = None,
    ) -> tuple[list[CoordinatorActionView], int]:
        """Return a page of actions and the matching total from one session."""
        if status_filters is not None and not isinstance(status_filters, str):
            status_filters = list(status_filters)
        subset = self._subset(job_id, status_filters, start, length)
        count = CoordJobGetActionsCount(
            job_id, status_filters, validate_status=self.query_config.validate_status
        )
        async with self.query_session() as session:
            actions = await subset.execute(session)
            total = await count.execute(session)
        return actions, total


__all__ = ["CoordinatorDB"]
