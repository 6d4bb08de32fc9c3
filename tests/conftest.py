from datetime import datetime, timedelta, timezone

import pytest

from jobgate.db import CoordinatorAction, CoordinatorDB, action_id

BASE_TIME = datetime(2024, 1, 1, 0, 0, tzinfo=timezone.utc)
STATUS_CYCLE = ["SUCCEEDED", "RUNNING", "KILLED", "WAITING"]


def make_action(job_id: str, number: int, status: str) -> CoordinatorAction:
    return CoordinatorAction(
        id=action_id(job_id, number),
        job_id=job_id,
        action_number=number,
        type="coordinator-action",
        status=status,
        nominal_time=BASE_TIME + timedelta(hours=number),
        external_id=f"wf-{number:04d}",
        action_xml=f"<action number='{number}'/>",
        run_conf="<configuration/>",
        pending=1,
        error_message="internal detail",
    )


@pytest.fixture
def seeded_db(tmp_path):
    """Return a coroutine creating a database with one job of ``count`` actions.

    Action ``n`` has nominal time ``BASE_TIME + n hours`` and status
    ``STATUS_CYCLE[(n - 1) % 4]``. Actions are inserted in reverse order so
    that insertion order never matches nominal time order.
    """

    async def _make(
        count: int = 10, job_id: str = "0000001-C", **db_kwargs
    ) -> CoordinatorDB:
        db = CoordinatorDB(f"sqlite+aiosqlite:///{tmp_path / 'coord.db'}", **db_kwargs)
        await db.init_db()
        await db.add_job(job_id, app_name="daily-ingest", status="RUNNING")
        await db.add_actions(
            make_action(job_id, n, STATUS_CYCLE[(n - 1) % len(STATUS_CYCLE)])
            for n in range(count, 0, -1)
        )
        return db

    return _make
