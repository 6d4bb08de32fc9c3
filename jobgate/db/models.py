from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from sqlalchemy import Column, Text, UniqueConstraint
from sqlmodel import Field, SQLModel


class CoordinatorActionStatus(str, Enum):
    """Statuses a coordinator action moves through."""

    WAITING = "WAITING"
    READY = "READY"
    SUBMITTED = "SUBMITTED"
    RUNNING = "RUNNING"
    SUSPENDED = "SUSPENDED"
    TIMEDOUT = "TIMEDOUT"
    SUCCEEDED = "SUCCEEDED"
    KILLED = "KILLED"
    FAILED = "FAILED"
    IGNORED = "IGNORED"
    SKIPPED = "SKIPPED"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def action_id(job_id: str, action_number: int) -> str:
    """Return the conventional ``<job id>@<number>`` action identifier."""
    return f"{job_id}@{action_number}"


class CoordinatorJob(SQLModel, table=True):
    """A recurring coordinator job owning a series of actions."""

    id: str = Field(primary_key=True)
    app_name: str
    status: str = Field(default="PREP")
    created_time: datetime = Field(default_factory=_utcnow)


class CoordinatorAction(SQLModel, table=True):
    """One materialized execution of a coordinator job."""

    __table_args__ = (UniqueConstraint("job_id", "action_number"),)

    id: str = Field(primary_key=True)
    job_id: str = Field(foreign_key="coordinatorjob.id", index=True)
    action_number: int
    type: Optional[str] = None
    status: str = Field(default=CoordinatorActionStatus.WAITING.value, index=True)
    nominal_time: datetime = Field(index=True)
    created_time: datetime = Field(default_factory=_utcnow)
    last_modified_time: datetime = Field(default_factory=_utcnow)
    external_id: Optional[str] = None
    external_status: Optional[str] = None
    tracker_uri: Optional[str] = None
    console_url: Optional[str] = None
    missing_dependencies: Optional[str] = Field(default=None, sa_column=Column(Text))
    timeout: int = -1
    action_xml: Optional[str] = Field(default=None, sa_column=Column(Text))
    created_conf: Optional[str] = Field(default=None, sa_column=Column(Text))
    run_conf: Optional[str] = Field(default=None, sa_column=Column(Text))
    sla_xml: Optional[str] = Field(default=None, sa_column=Column(Text))

    # engine bookkeeping, never exposed through CoordinatorActionView
    pending: int = 0
    error_code: Optional[str] = None
    error_message: Optional[str] = None
    external_child_ids: Optional[str] = Field(default=None, sa_column=Column(Text))
