import pytest

from jobgate.db.models import CoordinatorActionStatus
from jobgate.errors import QueryExecutionError
from jobgate.executor import normalize_status_filters, parse_status_filter


def test_parse_status_filter_pairs_and_lists():
    assert parse_status_filter("status=RUNNING;status=KILLED") == ["RUNNING", "KILLED"]
    assert parse_status_filter("Status=running,failed; status=RUNNING") == [
        "RUNNING",
        "FAILED",
    ]
    assert parse_status_filter("") == []


@pytest.mark.parametrize(
    "text",
    [
        "user=bob",
        "status",
        "status=NOPE",
        "status=RUNNING;name=x",
        "status=",
        "status=,",
        "status=RUNNING;status= ",
    ],
)
def test_parse_status_filter_rejects_bad_input(text):
    with pytest.raises(QueryExecutionError):
        parse_status_filter(text)


def test_normalize_status_filters_accepts_enum_members_and_dedupes():
    statuses = normalize_status_filters(
        [CoordinatorActionStatus.READY, "READY", "WAITING"]
    )

    assert statuses == ["READY", "WAITING"]


def test_normalize_status_filters_without_validation_keeps_unknown_values():
    assert normalize_status_filters(["custom"], validate=False) == ["custom"]
    with pytest.raises(ValueError):
        normalize_status_filters(["custom"])
