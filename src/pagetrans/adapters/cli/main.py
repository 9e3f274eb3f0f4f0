# src/pagetrans/adapters/cli/main.py
"""PageTrans 命令行入口。"""

from typing import Annotated, Literal

import typer
from rich.console import Console
from rich.traceback import install as install_rich_tracebacks

from pagetrans.bootstrap import bootstrap_app
from pagetrans.observability.logging_config import setup_logging_from_config

from .commands import db, jobs, request, worker

install_rich_tracebacks(show_locals=False, word_wrap=True)

app = typer.Typer(
    name="pagetrans",
    help="PDF 页面按需翻译服务的命令行管理工具。",
    add_completion=False,
    no_args_is_help=True,
)

app.add_typer(db.app, name="db")
app.add_typer(request.app, name="request")
app.add_typer(worker.app, name="worker")
app.add_typer(jobs.app, name="jobs")

console = Console()


@app.callback()
def main(
    ctx: typer.Context,
    env: Annotated[
        str, typer.Option("--env", help="运行环境 (dev, test, prod)")
    ] = "dev",
):
    """
    主回调函数，在任何子命令执行前运行，负责加载配置和初始化日志。
    """
    if ctx.resilient_parsing:
        return

    env_mode = env.lower()
    if env_mode not in ("prod", "dev", "test"):
        console.print(f"[bold red]未知的运行环境: {env}[/bold red]")
        raise typer.Exit(code=2)

    container = bootstrap_app(env_mode=env_mode)  # type: ignore[arg-type]
    setup_logging_from_config(container.config(), service="pagetrans-cli")
    ctx.obj = container


if __name__ == "__main__":
    app()
