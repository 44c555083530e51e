"""Commands for looking up suppressed failure snapshots."""

import asyncio

import typer
from pydantic import ValidationError
from rich.box import ROUNDED
from rich.console import Group
from rich.panel import Panel
from rich.text import Text

from retrymute.cli._console import console, error, info, nl, setup_logging
from retrymute.engine.store import SnapshotStore, connect_redis
from retrymute.keys import failure_key
from retrymute.models import FailureSnapshot


def key(
    tracking_key: str = typer.Argument(..., help="Retry tracking key of the job"),
) -> None:
    """Print the Redis key holding a job's suppressed failure."""
    console.print(failure_key(tracking_key), markup=False, emoji=False, soft_wrap=True)


async def _load(
    tracking_key: str, redis_url: str | None
) -> tuple[FailureSnapshot | None, float | None]:
    client = await connect_redis(redis_url)
    try:
        store = SnapshotStore(client)
        snapshot = await store.read_snapshot(tracking_key)
        ttl = await store.snapshot_ttl(tracking_key) if snapshot else None
        return snapshot, ttl
    finally:
        await client.aclose()


def _snapshot_panel(
    tracking_key: str, snapshot: FailureSnapshot, ttl: float | None
) -> Panel:
    lines: list[Text] = []

    header = Text()
    header.append(snapshot.exception, style="red bold")
    header.append(": ", style="dim")
    header.append(snapshot.error)
    lines.append(header)

    meta = Text()
    meta.append(f"failed_at={snapshot.failed_at}", style="dim")
    meta.append(" · ", style="dim")
    meta.append(f"queue={snapshot.queue or '-'}", style="dim")
    meta.append(" · ", style="dim")
    meta.append(f"worker={snapshot.worker or '-'}", style="dim")
    if ttl is not None:
        meta.append(" · ", style="dim")
        meta.append(f"expires in {ttl:.1f}s", style="cyan")
    lines.append(meta)

    job = Text()
    job.append("job ", style="dim")
    job.append(str(snapshot.payload.get("class")), style="white")
    job.append(f" {snapshot.payload.get('args', [])}", style="dim")
    lines.append(job)

    if snapshot.backtrace:
        lines.append(Text())
        lines.append(Text("Backtrace", style="bold"))
        for frame in snapshot.backtrace:
            lines.append(Text(f"  {frame}", style="dim"))

    return Panel(
        Group(*lines),
        title=f"[bold]{failure_key(tracking_key)}[/bold]",
        title_align="left",
        border_style="dim",
        box=ROUNDED,
        padding=(0, 1),
    )


def show(
    tracking_key: str = typer.Argument(..., help="Retry tracking key of the job"),
    redis_url: str | None = typer.Option(
        None,
        "--redis-url",
        help="Redis URL (overrides RETRYMUTE_REDIS_URL)",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose logging",
    ),
) -> None:
    """Show the latest suppressed failure of a retrying job."""
    setup_logging(verbose=verbose)

    try:
        snapshot, ttl = asyncio.run(_load(tracking_key, redis_url))
    except ValidationError as exc:
        nl()
        error(f"{failure_key(tracking_key)} does not hold a valid snapshot")
        info(f"{exc.error_count()} validation error(s)")
        nl()
        raise typer.Exit(1)

    if snapshot is None:
        nl()
        error(f"No suppressed failure for {tracking_key}")
        nl()
        raise typer.Exit(1)

    console.print(_snapshot_panel(tracking_key, snapshot, ttl))
