"""Command line interface for verifying definitions and listing actions."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import List, Optional
from xml.etree.ElementTree import ParseError

import typer
import yaml

from jobgate.config import load_config
from jobgate.db import CoordinatorDB, get_database
from jobgate.definition import load_definition
from jobgate.errors import ParameterVerifierError, QueryExecutionError
from jobgate.executor import parse_status_filter
from jobgate.jobconf import apply_overrides, load_job_conf
from jobgate.verifier import ParameterVerifier
from jobgate.views import CoordinatorActionView

app = typer.Typer(help="CLI for jobgate job definitions and coordinator actions")


@app.callback()
def main(
    log_level: str = typer.Option("WARNING", help="Logging level"),
) -> None:
    """jobgate CLI entry point."""
    logging.basicConfig(
        level=log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@app.command("verify")
def verify(
    definition: Path,
    conf: Optional[Path] = typer.Option(
        None, "--conf", "-c", help="Job configuration file (YAML or XML)"
    ),
    define: List[str] = typer.Option(
        [], "--define", "-D", help="Configuration override as key=value"
    ),
    config: Optional[str] = typer.Option(None, help="jobgate configuration file"),
) -> None:
    """
    Verify the <parameters> section of a job definition.

    Missing parameters with declared defaults are filled in and the resolved
    job configuration is printed as YAML.

    Example:
        jobgate verify workflow.xml --conf job.yaml -D inputDir=/data/in
    """
    settings = load_config(config)
    try:
        root = load_definition(definition)
    except (OSError, ParseError) as exc:
        typer.secho(f"Cannot read definition {definition}: {exc}", fg=typer.colors.RED)
        raise typer.Exit(code=1)

    try:
        job_conf = apply_overrides(load_job_conf(conf), define)
    except (OSError, ValueError, yaml.YAMLError, ParseError) as exc:
        typer.secho(f"Cannot read job configuration: {exc}", fg=typer.colors.RED)
        raise typer.Exit(code=1)

    try:
        ParameterVerifier(settings.verifier).verify(job_conf, root)
    except ParameterVerifierError as exc:
        typer.secho(str(exc), fg=typer.colors.RED)
        raise typer.Exit(code=1)

    typer.echo(yaml.safe_dump(job_conf, sort_keys=True, default_flow_style=False), nl=False)


def _format_action(action: CoordinatorActionView) -> str:
    return "\t".join(
        [
            action.id,
            str(action.action_number),
            action.status,
            action.nominal_time.isoformat(),
            action.external_id or "-",
        ]
    )


async def _fetch(
    db: CoordinatorDB, job_id: str, statuses: list[str], offset: int, length: int
) -> tuple[list[CoordinatorActionView], int]:
    try:
        return await db.fetch_page(job_id, statuses, start=offset, length=length)
    finally:
        await db.dispose()


@app.command("actions")
def actions(
    job_id: str,
    filter_: Optional[str] = typer.Option(
        None, "--filter", help='Status filter, e.g. "status=RUNNING;status=KILLED"'
    ),
    offset: int = typer.Option(1, help="1-based position of the first action"),
    length: Optional[int] = typer.Option(None, "--len", help="Number of actions"),
    database_url: Optional[str] = typer.Option(None, help="Database URL"),
    config: Optional[str] = typer.Option(None, help="jobgate configuration file"),
) -> None:
    """
    List a page of a coordinator job's actions ordered by nominal time.

    Example:
        jobgate actions 0000001-C --filter "status=RUNNING" --offset 1 --len 20
    """
    settings = load_config(config)
    try:
        db = get_database(database_url, settings)
    except ValueError as exc:
        typer.secho(str(exc), fg=typer.colors.RED)
        raise typer.Exit(code=1)

    if length is None:
        length = settings.query.default_length
    try:
        statuses = parse_status_filter(filter_) if filter_ else []
        found, total = asyncio.run(_fetch(db, job_id, statuses, offset, length))
    except QueryExecutionError as exc:
        typer.secho(str(exc), fg=typer.colors.RED)
        raise typer.Exit(code=1)

    if not found:
        typer.echo("No actions found")
        return
    for action in found:
        typer.echo(_format_action(action))
    typer.echo(f"Showing {len(found)} of {total} action(s)")


@app.command("init-db")
def init_db(
    database_url: Optional[str] = typer.Option(None, help="Database URL"),
    config: Optional[str] = typer.Option(None, help="jobgate configuration file"),
) -> None:
    """Create the coordinator job and action tables."""
    try:
        db = get_database(database_url, load_config(config))
    except ValueError as exc:
        typer.secho(str(exc), fg=typer.colors.RED)
        raise typer.Exit(code=1)

    async def _init() -> None:
        try:
            await db.init_db()
        finally:
            await db.dispose()

    asyncio.run(_init())
    typer.echo("Database initialized")
