# tests/test_commands.py

from __future__ import annotations

from collections.abc import Iterator
from types import SimpleNamespace

import pytest

from tasks_panel.cli.bootstrap import create_initial_state, start_background, stop_background
from tasks_panel.cli.commands import CommandRegistry, add_title, badge_label, registry
from tasks_panel.core.state import AppState
from tasks_panel.sync.command_executor import CommandResult, ErrorKind

from .fakes import FakeCommandRunner, listing


@pytest.fixture()
def app_state(settings: SimpleNamespace, runner: FakeCommandRunner) -> Iterator[AppState]:
    state = create_initial_state(settings=settings, runner=runner)
    start_background(state)
    try:
        yield state
    finally:
        stop_background(state)


def test_command_registry_routes_2_and_3_params() -> None:
    reg = CommandRegistry()
    called = {"h2": 0, "h3": 0}
    notes: list[str] = []

    def h2(state, args):
        called["h2"] += 1
        return "h2:" + ",".join(args)

    def h3(state, args, emit):
        called["h3"] += 1
        if emit is not None:
            emit("note")
        return "h3"

    reg.register("a", h2, "a", aliases=["aa"])
    reg.register("b", h3, "b")

    assert reg.handle(None, "/a x y") == "h2:x,y"  # type: ignore[arg-type]
    assert reg.handle(None, "/AA") == "h2:"  # type: ignore[arg-type]
    assert reg.handle(None, "/b", emit=notes.append) == "h3"  # type: ignore[arg-type]
    assert called == {"h2": 2, "h3": 1}
    assert notes == ["note"]


def test_command_registry_unknown_and_non_command() -> None:
    reg = CommandRegistry()
    assert reg.handle(None, "hello") is None  # type: ignore[arg-type]
    assert "Unknown command" in (reg.handle(None, "/nope") or "")  # type: ignore[arg-type]
    assert "Empty command" in (reg.handle(None, "/") or "")  # type: ignore[arg-type]


def test_badge_label() -> None:
    assert badge_label(0) == ""
    assert badge_label(3) == "3"
    assert badge_label(9) == "9"
    assert badge_label(10) == "9+"


def test_bootstrap_builds_engine_from_settings(settings: SimpleNamespace, runner: FakeCommandRunner) -> None:
    state = create_initial_state(settings=settings, runner=runner)

    assert state.engine.commands.list_id == "LIST1"
    assert state.engine.commands.account == "me@example.com"
    assert state.scheduler.interval_seconds == 300.0
    assert settings.data_dir.is_dir()


def test_refresh_list_and_done(app_state: AppState, runner: FakeCommandRunner) -> None:
    runner.results = [
        CommandResult.success(listing(("a1", "Buy milk", "needsAction", "2024-05-01"), ("b2", "Call mom", "needsAction"))),
        CommandResult.success(""),
    ]

    out = registry.handle(app_state, "/refresh")
    assert out == "1. Buy milk (due 2024-05-01)\n2. Call mom"

    assert registry.handle(app_state, "/done 1") == "Completed: Buy milk"
    assert registry.handle(app_state, "/list") == "1. Call mom"
    assert "Pending: 1" in (registry.handle(app_state, "/status") or "")
    assert registry.handle(app_state, "/done zzz") == "No such task: zzz"


def test_add_reports_failure(app_state: AppState, runner: FakeCommandRunner) -> None:
    runner.results = [CommandResult.failure(ErrorKind.NON_ZERO_EXIT, "Exit 1", exit_code=1)]

    assert registry.handle(app_state, "/add") == "Usage: /add <title>"
    assert registry.handle(app_state, "/add Buy milk") == "Add failed: Exit 1"
    assert "Last error: Exit 1" in (registry.handle(app_state, "/status") or "")


def test_auto_toggle(app_state: AppState) -> None:
    assert "OFF" in (registry.handle(app_state, "/auto") or "")
    assert registry.handle(app_state, "/auto on") == "Auto-refresh enabled."
    assert app_state.scheduler.is_running
    assert registry.handle(app_state, "/auto off") == "Auto-refresh disabled."
    assert not app_state.scheduler.is_running


def test_add_keeps_inner_whitespace(app_state: AppState, runner: FakeCommandRunner) -> None:
    assert registry.handle(app_state, "/add   Buy   milk\tnow  ") == "Added: Buy   milk\tnow"
    assert runner.calls[0][1] == app_state.engine.commands.add_args("Buy   milk\tnow")
    assert runner.verbs() == ["add", "list"]


def test_plain_title_is_added_verbatim(app_state: AppState, runner: FakeCommandRunner) -> None:
    assert add_title(app_state, " /etc   notes ") == "Added: /etc   notes"
    assert runner.calls[0][1] == app_state.engine.commands.add_args("/etc   notes")


def test_raw_args_registry_passes_rest_of_line() -> None:
    reg = CommandRegistry()
    seen: list[list[str]] = []

    def h(state, args):
        seen.append(args)
        return "ok"

    reg.register("say", h, "say", raw_args=True)

    reg.handle(None, "/say  a   b ")  # type: ignore[arg-type]
    reg.handle(None, "/SAY")  # type: ignore[arg-type]

    assert seen == [["a   b "], []]
