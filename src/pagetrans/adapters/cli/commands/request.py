# src/pagetrans/adapters/cli/commands/request.py
"""提交翻译请求与查询翻译状态。"""

from __future__ import annotations

import asyncio
import json

import typer
from rich.console import Console

from pagetrans.di.container import AppContainer

from .._utils import container_scope

app = typer.Typer(help="提交翻译请求或查询翻译状态。", no_args_is_help=True)
console = Console()


def _print_payload(payload: dict, status_code: int) -> None:
    console.print_json(json.dumps(payload, ensure_ascii=False))
    if status_code >= 400:
        raise typer.Exit(code=1)


@app.command("translate")
def request_translate(
    ctx: typer.Context,
    document: str = typer.Argument(..., help="文档标识（文档目录下的文件名）"),
    page: int = typer.Argument(..., help="页码，从 1 开始"),
    lang: str = typer.Option(None, "--lang", "-l", help="目标语言代码"),
) -> None:
    """返回已有译文；若尚未翻译，则为该页面排队一个翻译任务。"""

    async def _run():
        container: AppContainer = ctx.obj
        async with container_scope(container):
            coordinator = await container.coordinator()
            return await coordinator.request_translation(document, page, lang)

    outcome = asyncio.run(_run())
    _print_payload(outcome.to_payload(), outcome.status_code)


@app.command("status")
def request_status(
    ctx: typer.Context,
    document: str = typer.Argument(..., help="文档标识"),
    page: int = typer.Argument(..., help="页码，从 1 开始"),
    lang: str = typer.Option(None, "--lang", "-l", help="目标语言代码"),
) -> None:
    """查询页面译文是否已就绪（不会创建任务）。"""

    async def _run():
        container: AppContainer = ctx.obj
        async with container_scope(container):
            coordinator = await container.coordinator()
            return await coordinator.check_status(document, page, lang)

    outcome = asyncio.run(_run())
    _print_payload(outcome.to_payload(), outcome.status_code)
