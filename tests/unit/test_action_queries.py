import pytest
from sqlalchemy.dialects import sqlite

from jobgate.db.queries import (
    GET_ACTIONS_FOR_COORD_JOB_ORDER_BY_NOMINAL_TIME,
    named_query,
)


def _compile(stmt):
    return stmt.compile(dialect=sqlite.dialect())


def test_base_query_filters_by_job_and_orders_by_nominal_time():
    query = named_query(GET_ACTIONS_FOR_COORD_JOB_ORDER_BY_NOMINAL_TIME, job_id="job-1")
    compiled = _compile(query.statement())
    sql = str(compiled)

    assert "job_id" in sql
    assert "ORDER BY coordinatoraction.nominal_time ASC" in sql
    assert "status IN" not in sql
    assert "job-1" not in sql
    assert "job-1" in compiled.params.values()


def test_status_clause_is_bound_and_precedes_order_by():
    query = named_query(
        GET_ACTIONS_FOR_COORD_JOB_ORDER_BY_NOMINAL_TIME, job_id="job-1"
    ).with_status(["RUNNING", "KILLED"])
    compiled = _compile(query.statement(offset=2, limit=5))
    sql = str(compiled)

    assert sql.index("WHERE") < sql.index("status IN") < sql.index("ORDER BY")
    assert " AND " in sql
    assert sql.count("ORDER BY") == 1
    assert "RUNNING" not in sql
    assert ["RUNNING", "KILLED"] in compiled.params.values()


def test_filter_values_resembling_sql_do_not_move_order_by():
    query = named_query(
        GET_ACTIONS_FOR_COORD_JOB_ORDER_BY_NOMINAL_TIME, job_id="job-1"
    ).with_status(["order by id", "x') OR 1=1 --"])
    sql = str(_compile(query.statement()))

    assert sql.count("ORDER BY") == 1
    assert "OR 1=1" not in sql
    assert sql.rstrip().endswith("coordinatoraction.action_number ASC")


def test_empty_status_list_leaves_query_unchanged():
    query = named_query(GET_ACTIONS_FOR_COORD_JOB_ORDER_BY_NOMINAL_TIME, job_id="job-1")

    assert query.with_status([]) is query


def test_count_statement_has_no_ordering():
    query = named_query(
        GET_ACTIONS_FOR_COORD_JOB_ORDER_BY_NOMINAL_TIME, job_id="job-1"
    ).with_status(["READY"])
    sql = str(_compile(query.count_statement()))

    assert "count(*)" in sql
    assert "ORDER BY" not in sql


def test_unknown_named_query():
    with pytest.raises(ValueError, match="Unknown named query"):
        named_query("GET_NOTHING")
