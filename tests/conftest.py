"""Shared fixtures: a recording console and a fake command runner."""

from __future__ import annotations

import io

import pytest
from rich.console import Console


@pytest.fixture
def console() -> Console:
    return Console(file=io.StringIO(), width=120, color_system=None)


def output(console: Console) -> str:
    return console.file.getvalue()


class FakeCommands:
    """Stand-in for ``_run_command`` keyed on the command tuple."""

    def __init__(self, results: dict[tuple[str, ...], tuple[int, str, str]]):
        self.results = results
        self.calls: list[tuple[str, ...]] = []

    def __call__(self, cmd: list[str], timeout: int = 10) -> tuple[int, str, str]:
        key = tuple(cmd)
        self.calls.append(key)
        return self.results.get(key, (-1, "", f"Command not found: {cmd[0]}"))


@pytest.fixture
def fake_commands(monkeypatch):
    """Install a FakeCommands; call the fixture value with the result map."""
    def install(results: dict[tuple[str, ...], tuple[int, str, str]]) -> FakeCommands:
        fake = FakeCommands(results)
        monkeypatch.setattr("pr_cleaner.requirements._run_command", fake)
        return fake
    return install
