# src/pagetrans/adapters/cli/commands/db.py
"""数据库管理命令。"""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console

from pagetrans.core.exceptions import PageTransError
from pagetrans.di.container import AppContainer
from pagetrans.infrastructure.db import create_schema

from .._utils import container_scope

app = typer.Typer(help="数据库管理命令。", no_args_is_help=True)
console = Console()


@app.command("init")
def db_init(ctx: typer.Context) -> None:
    """创建 page_translations 与 translation_jobs 表（已存在则跳过）。"""

    async def _async_init() -> None:
        container: AppContainer = ctx.obj
        async with container_scope(container):
            await create_schema(container.db_engine())

    try:
        asyncio.run(_async_init())
    except PageTransError as e:
        console.print(f"[bold red]❌ 初始化数据库失败: {e}[/bold red]")
        raise typer.Exit(code=1)
    console.print("[bold green]✅ 数据库表结构已就绪。[/bold green]")
