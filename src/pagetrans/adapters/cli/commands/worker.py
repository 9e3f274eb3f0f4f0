# src/pagetrans/adapters/cli/commands/worker.py
"""CLI 命令，用于启动后台翻译 Worker。"""

import asyncio

import structlog
import typer
from rich.console import Console

from pagetrans.core.exceptions import PageTransError
from pagetrans.di.container import AppContainer

from .._utils import container_scope

console = Console()
logger = structlog.get_logger(__name__)

app = typer.Typer(help="运行后台 Worker 进程。", no_args_is_help=True)


async def _run_worker(container: AppContainer) -> None:
    shutdown_event = asyncio.Event()
    async with container_scope(container):
        worker = await container.translation_worker()
        await worker.run_loop(shutdown_event)


@app.command("run")
def run_worker_cli(ctx: typer.Context) -> None:
    """启动翻译 Worker，直到收到 SIGINT/SIGTERM。"""
    container: AppContainer = ctx.obj
    config = container.config()
    if config.queue.kind == "memory":
        console.print(
            "[yellow]⚠ 当前使用进程内队列，Worker 只能处理本进程投递的任务。[/yellow]"
        )
    console.print("[cyan]🚀 正在启动翻译 Worker...[/cyan]")
    try:
        asyncio.run(_run_worker(container))
    except PageTransError as e:
        logger.error("Worker 进程意外终止。", error=str(e), exc_info=True)
        raise typer.Exit(code=1)
    console.print("[bold green]✅ Worker 已安全关闭。[/bold green]")
