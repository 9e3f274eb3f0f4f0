# src/pagetrans/adapters/cli/commands/jobs.py
"""翻译任务监控与维护命令。"""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone

import typer
from rich.console import Console, Group
from rich.live import Live
from rich.table import Table
from rich.text import Text

from pagetrans.application.services import JobMonitorService
from pagetrans.core.types import JobStatus
from pagetrans.di.container import AppContainer
from pagetrans.domain.jobs import Job

from .._utils import container_scope

app = typer.Typer(help="查看与维护翻译任务。", no_args_is_help=True)
console = Console()

WATCH_INTERVAL_SECONDS = 2.0

_STATUS_STYLES = {
    JobStatus.QUEUED: "yellow",
    JobStatus.PROCESSING: "cyan",
    JobStatus.COMPLETED: "green",
    JobStatus.FAILED: "bold red",
}


def _fmt_time(value: datetime | None) -> str:
    return value.astimezone().strftime("%Y-%m-%d %H:%M:%S") if value else "-"


def _fmt_duration(seconds: int | None) -> str:
    if seconds is None:
        return "-"
    minutes, secs = divmod(seconds, 60)
    return f"{minutes}m {secs}s" if minutes else f"{secs}s"


def render_jobs(jobs: list[Job], *, show_all: bool) -> Group:
    """构造任务表格与状态汇总。"""
    now = datetime.now(timezone.utc)
    title = "最近 50 个任务" if show_all else "活跃任务"
    table = Table(title=title, expand=False)
    for column in (
        "ID", "Status", "Document", "Page", "Lang", "Worker PID",
        "Created", "Started", "Duration", "Error",
    ):
        table.add_column(column, overflow="fold")

    for job in jobs:
        error = job.error_message or ""
        table.add_row(
            str(job.id),
            Text(job.status.value, style=_STATUS_STYLES[job.status]),
            job.document_id,
            str(job.page),
            job.target_language.upper(),
            str(job.worker_id) if job.worker_id is not None else "-",
            _fmt_time(job.created_at),
            _fmt_time(job.started_at),
            _fmt_duration(job.duration_seconds(now)),
            error if len(error) <= 60 else error[:57] + "...",
        )

    summary = JobMonitorService.summarize(jobs)
    summary_text = Text(
        "  ".join(f"{name}: {count}" for name, count in summary.items()), style="dim"
    )
    if not jobs:
        return Group(Text("没有任务。", style="dim"), summary_text)
    return Group(table, summary_text)


@app.command("monitor")
def jobs_monitor(
    ctx: typer.Context,
    watch: bool = typer.Option(False, "--watch", "-w", help="每 2 秒刷新一次。"),
    show_all: bool = typer.Option(
        False, "--all", "-a", help="显示最近 50 个任务（包括已结束的）。"
    ),
) -> None:
    """查看翻译任务队列。"""

    async def _snapshot(container: AppContainer) -> Group:
        monitor = container.job_monitor_service()
        jobs = await monitor.list_jobs(include_finished=show_all)
        return render_jobs(jobs, show_all=show_all)

    async def _run() -> None:
        container: AppContainer = ctx.obj
        async with container_scope(container):
            if not watch:
                console.print(await _snapshot(container))
                return
            with Live(await _snapshot(container), console=console) as live:
                while True:
                    await asyncio.sleep(WATCH_INTERVAL_SECONDS)
                    live.update(await _snapshot(container))

    try:
        asyncio.run(_run())
    except KeyboardInterrupt:
        console.print("[dim]已停止监控。[/dim]")


@app.command("cleanup")
def jobs_cleanup(
    ctx: typer.Context,
    older_than_hours: int = typer.Option(
        24, "--older-than-hours", min=1, help="删除早于该小时数的已结束任务。"
    ),
) -> None:
    """删除已完成或失败、且结束时间早于截止时间的任务。"""

    async def _run() -> int:
        container: AppContainer = ctx.obj
        async with container_scope(container):
            return await container.job_monitor_service().cleanup(older_than_hours)

    deleted = asyncio.run(_run())
    console.print(f"[bold green]✅ 已删除 {deleted} 个历史任务。[/bold green]")
