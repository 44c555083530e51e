"""Probe command for checking a job class's retry capability."""

import asyncio
import json
from typing import Any

import typer

from retrymute.cli._console import console, error, info, setup_logging, success
from retrymute.engine.introspection import JobIntrospector, ProbeResult
from retrymute.engine.store import SnapshotStore, connect_redis


async def _is_retrying(tracking_key: str, redis_url: str) -> bool:
    client = await connect_redis(redis_url)
    try:
        return await SnapshotStore(client).key_exists(tracking_key)
    finally:
        await client.aclose()


def probe(
    job_class: str = typer.Argument(..., help="Job class path, e.g. app.jobs:Charge"),
    args_json: str = typer.Argument("[]", help="Job arguments as a JSON list"),
    redis_url: str | None = typer.Option(
        None,
        "--redis-url",
        help="Also check whether the job is currently retrying",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose logging",
    ),
) -> None:
    """
    Report whether a job class supports retry introspection.

    Examples:
        retrymute probe app.jobs:ChargeCard '[42]'
        retrymute probe app.jobs:ChargeCard '[42]' --redis-url redis://localhost:6379
    """
    setup_logging(verbose=verbose)

    try:
        args: Any = json.loads(args_json)
    except json.JSONDecodeError as e:
        error(f"Invalid JSON: {e}")
        raise typer.Exit(1)
    if not isinstance(args, list):
        error("Arguments must be a JSON list")
        raise typer.Exit(1)

    result: ProbeResult = JobIntrospector().probe({"class": job_class, "args": args})
    if result.capability is None:
        error(f"{job_class}: {result.outcome.value}")
        if result.reason:
            info(result.reason)
        raise typer.Exit(1)

    success(f"{job_class}: retryable")
    info(f"tracking key  {result.capability.tracking_key}")
    info(f"retry delay   {result.capability.retry_delay}s")

    if redis_url:
        retrying = asyncio.run(_is_retrying(result.capability.tracking_key, redis_url))
        console.print(f"  [dim]→[/dim] retrying      {'yes' if retrying else 'no'}")
