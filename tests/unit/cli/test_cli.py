# tests/unit/cli/test_cli.py
"""CLI 命令的测试：通过 CliRunner 调用，配置完全来自环境变量。"""

import json
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
from rich.console import Console
from typer.testing import CliRunner

from pagetrans.adapters.cli.commands.jobs import render_jobs
from pagetrans.adapters.cli.main import app
from pagetrans.core.types import JobStatus
from pagetrans.domain.jobs import Job

pytestmark = pytest.mark.unit


@pytest.fixture
def cli_env(tmp_path: Path) -> dict[str, str]:
    return {
        "PAGETRANS_DATABASE__URL": f"sqlite+aiosqlite:///{tmp_path / 'cli.db'}",
        "PAGETRANS_DOCUMENTS__DIRECTORY": str(tmp_path),
        "PAGETRANS_ACTIVE_ENGINE": "debug",
        "PAGETRANS_LOGGING__FORMAT": "json",
        "PAGETRANS_LOGGING__LEVEL": "ERROR",
    }


def _json_payload(output: str) -> dict:
    start = output.index("{")
    return json.loads(output[start : output.rindex("}") + 1])


def test_unknown_env_mode_exits() -> None:
    result = CliRunner().invoke(app, ["--env", "staging", "db", "init"])
    assert result.exit_code == 2


def test_db_init_then_jobs_monitor(cli_env: dict[str, str]) -> None:
    runner = CliRunner()
    result = runner.invoke(app, ["--env", "prod", "db", "init"], env=cli_env)
    assert result.exit_code == 0, result.output

    result = runner.invoke(app, ["--env", "prod", "jobs", "monitor", "--all"], env=cli_env)
    assert result.exit_code == 0, result.output


def test_translate_missing_document_reports_not_found(cli_env: dict[str, str]) -> None:
    runner = CliRunner()
    runner.invoke(app, ["--env", "prod", "db", "init"], env=cli_env)

    result = runner.invoke(
        app,
        ["--env", "prod", "request", "translate", "missing.pdf", "1", "-l", "fr"],
        env=cli_env,
    )
    assert result.exit_code == 1
    payload = _json_payload(result.stdout)
    assert payload["status"] == "error"
    assert payload["message"] == "Document not found"


def test_render_jobs_table() -> None:
    now = datetime.now(timezone.utc)
    failed = Job("report.pdf", 3, "es", id=1, created_at=now - timedelta(minutes=5))
    failed.mark_processing(4242)
    failed.mark_failed("AI unreachable " * 10)
    queued = Job("report.pdf", 4, "fr", id=2, created_at=now)

    console = Console(width=200, record=True)
    console.print(render_jobs([failed, queued], show_all=True))
    text = console.export_text()

    assert "report.pdf" in text
    assert JobStatus.FAILED.value in text
    assert "4242" in text
    assert "total: 2" in text


def test_render_empty_job_list() -> None:
    console = Console(width=120, record=True)
    console.print(render_jobs([], show_all=False))
    assert "没有任务" in console.export_text()
