# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from tasks_panel.sync.sync_engine import SyncEngine, TaskCommands

from .fakes import FIXED_NOW, FakeCommandRunner


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with bootstrap and commands.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the environment.
    """
    return SimpleNamespace(
        app_name="tasks-panel",
        log_level="INFO",
        data_dir=tmp_path / "data",
        gog_path="/usr/local/bin/gog",
        list_id="LIST1",
        account="me@example.com",
        refresh_interval_seconds=300.0,
        auto_refresh=False,
        console_enabled=False,
    )


@pytest.fixture()
def commands(settings: SimpleNamespace) -> TaskCommands:
    return TaskCommands(gog_path=settings.gog_path, list_id=settings.list_id, account=settings.account)


@pytest.fixture()
def runner() -> FakeCommandRunner:
    return FakeCommandRunner()


@pytest.fixture()
def engine(commands: TaskCommands, runner: FakeCommandRunner) -> SyncEngine:
    return SyncEngine(commands, runner=runner, clock=lambda: FIXED_NOW)
