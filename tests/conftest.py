"""Test configuration and fixtures."""

from __future__ import annotations

import io
import json
from pathlib import Path

import pytest
from rich.console import Console

from repo_scaffold.scaffold.console import ConsoleReporter
from repo_scaffold.scaffold.errors import CommandError


class FakeRunner:
    """Records commands and returns scripted results."""

    def __init__(
        self,
        *,
        git_name: str | None = "Ann",
        git_email: str | None = "ann@x.com",
        fail_on: set[str] | None = None,
    ) -> None:
        self.git_name = git_name
        self.git_email = git_email
        self.fail_on = fail_on or set()
        self.calls: list[tuple[list[str], Path | None]] = []

    def run(self, command: list[str] | str, *, cwd: Path | None = None) -> str:
        args = command.split() if isinstance(command, str) else list(command)
        self.calls.append((args, cwd))
        joined = " ".join(args)
        if any(joined.startswith(prefix) for prefix in self.fail_on):
            raise CommandError(args, returncode=1, stderr="boom")
        if args[:2] == ["git", "config"]:
            value = self.git_name if args[2] == "user.name" else self.git_email
            if value is None:
                raise CommandError(args, returncode=1)
            return value + "\n"
        return ""

    def commands(self) -> list[str]:
        return [" ".join(args) for args, _cwd in self.calls]


class FakeFetcher:
    """Writes a template tree into the destination instead of downloading."""

    def __init__(
        self,
        files: dict[str, str | bytes] | None = None,
        error: Exception | None = None,
    ) -> None:
        self.files = files if files is not None else default_template_files()
        self.error = error
        self.calls: list[tuple[str, Path]] = []

    def fetch(self, repo: str, dest: Path) -> Path:
        self.calls.append((repo, dest))
        if self.error is not None:
            raise self.error
        for relative, content in self.files.items():
            path = dest / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, bytes):
                path.write_bytes(content)
            else:
                path.write_text(content, encoding="utf-8")
        return dest


class ScriptedPrompter:
    """Answers prompts from pre-recorded lists."""

    def __init__(self, choices: list[str] | None = None, texts: list[str] | None = None) -> None:
        self.choices = list(choices or [])
        self.texts = list(texts or [])
        self.choose_calls: list[tuple[str, dict[str, str]]] = []
        self.text_calls: list[str] = []

    def choose(self, message: str, choices: dict[str, str], *, default: str | None = None) -> str:
        self.choose_calls.append((message, choices))
        return self.choices.pop(0)

    def ask_text(self, message: str) -> str:
        self.text_calls.append(message)
        return self.texts.pop(0)

    @property
    def prompt_count(self) -> int:
        return len(self.choose_calls) + len(self.text_calls)


def default_template_files() -> dict[str, str]:
    manifest = {
        "name": "template",
        "keywords": ["vue", "typescript"],
        "license": "MIT",
        "files": ["dist"],
        "version": "0.0.1",
        "scripts": {"serve": "vue-cli-service serve"},
    }
    return {
        "package.json": json.dumps(manifest, indent=2),
        "src/main.ts": "console.log('hi')\n",
        ".git/HEAD": "ref: refs/heads/master\n",
        "changelogs/CHANGELOG.md": "# Changes\n",
    }


@pytest.fixture
def reporter() -> ConsoleReporter:
    """Reporter writing into an in-memory buffer."""
    return ConsoleReporter(Console(file=io.StringIO(), force_terminal=False, width=120))


@pytest.fixture
def runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def fetcher() -> FakeFetcher:
    return FakeFetcher()


@pytest.fixture
def make_runner() -> type[FakeRunner]:
    return FakeRunner


@pytest.fixture
def make_fetcher() -> type[FakeFetcher]:
    return FakeFetcher


@pytest.fixture
def make_prompter() -> type[ScriptedPrompter]:
    return ScriptedPrompter
