"""Public, read-only snapshots of persisted coordinator actions."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict

from .db.models import CoordinatorAction

# Fields of CoordinatorAction copied into a view. Anything on the table that
# is not listed here must be listed in INTERNAL_FIELDS.
VIEW_FIELDS: tuple[str, ...] = (
    "id",
    "action_number",
    "action_xml",
    "console_url",
    "created_conf",
    "external_status",
    "missing_dependencies",
    "run_conf",
    "timeout",
    "tracker_uri",
    "type",
    "created_time",
    "external_id",
    "job_id",
    "last_modified_time",
    "nominal_time",
    "sla_xml",
    "status",
)

INTERNAL_FIELDS: frozenset[str] = frozenset(
    {"pending", "error_code", "error_message", "external_child_ids"}
)


class CoordinatorActionView(BaseModel):
    """Immutable copy of the public fields of a coordinator action."""

    id: str
    action_number: int
    action_xml: Optional[str] = None
    console_url: Optional[str] = None
    created_conf: Optional[str] = None
    external_status: Optional[str] = None
    missing_dependencies: Optional[str] = None
    run_conf: Optional[str] = None
    timeout: int = -1
    tracker_uri: Optional[str] = None
    type: Optional[str] = None
    created_time: datetime
    external_id: Optional[str] = None
    job_id: str
    last_modified_time: datetime
    nominal_time: datetime
    sla_xml: Optional[str] = None
    status: str

    model_config = ConfigDict(frozen=True)


def project_action(record: CoordinatorAction) -> CoordinatorActionView:
    """Copy the allow-listed fields of ``record`` into a detached view."""
    return CoordinatorActionView(
        **{name: getattr(record, name) for name in VIEW_FIELDS}
    )
