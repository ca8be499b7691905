"""Unit tests for conflict resolution."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import Mock

import pytest

from repo_scaffold.scaffold.errors import ConflictAbort
from repo_scaffold.scaffold.workflow.conflict import (
    CONFLICT_CHOICES,
    ConflictDecision,
    ConflictResolver,
    decide_conflict,
)
from repo_scaffold.scaffold.workflow.state_machine import ScaffoldRequest


@pytest.mark.parametrize(
    ("exists", "force", "expected"),
    [
        (False, False, ConflictDecision.PROCEED),
        (True, False, ConflictDecision.PROMPT),
        (True, True, ConflictDecision.OVERWRITE),
        (False, True, ConflictDecision.OVERWRITE),
    ],
)
def test_decide_conflict(exists: bool, force: bool, expected: ConflictDecision) -> None:
    assert decide_conflict(exists=exists, force=force) == expected


def _existing_target(tmp_path: Path) -> Path:
    target = tmp_path / "demo"
    target.mkdir()
    (target / "file.txt").write_text("content", encoding="utf-8")
    return target


def test_missing_target_proceeds_without_prompt(tmp_path: Path, reporter, make_prompter) -> None:
    prompter = make_prompter()
    resolver = ConflictResolver(prompter=prompter, reporter=reporter, cwd=tmp_path)
    request = ScaffoldRequest.from_name("demo", cwd=tmp_path)

    resolution = resolver.resolve(request)

    assert resolution.request == request
    assert not resolution.renamed
    assert not resolution.overwritten
    assert prompter.prompt_count == 0


def test_force_deletes_without_prompt(tmp_path: Path, reporter, make_prompter) -> None:
    target = _existing_target(tmp_path)
    prompter = make_prompter()
    resolver = ConflictResolver(prompter=prompter, reporter=reporter, cwd=tmp_path)

    resolution = resolver.resolve(ScaffoldRequest.from_name("demo", cwd=tmp_path, force_overwrite=True))

    assert resolution.overwritten
    assert not target.exists()
    assert prompter.prompt_count == 0


def test_prompt_offers_exactly_three_choices(tmp_path: Path, reporter, make_prompter) -> None:
    _existing_target(tmp_path)
    prompter = make_prompter(choices=["overwrite"])
    resolver = ConflictResolver(prompter=prompter, reporter=reporter, cwd=tmp_path)

    resolver.resolve(ScaffoldRequest.from_name("demo", cwd=tmp_path))

    (_message, choices), = prompter.choose_calls
    assert list(choices) == ["overwrite", "rename", "cancel"]
    assert choices == CONFLICT_CHOICES


def test_overwrite_choice_deletes_target(tmp_path: Path, reporter, make_prompter) -> None:
    target = _existing_target(tmp_path)
    resolver = ConflictResolver(
        prompter=make_prompter(choices=["overwrite"]), reporter=reporter, cwd=tmp_path
    )

    resolution = resolver.resolve(ScaffoldRequest.from_name("demo", cwd=tmp_path))

    assert resolution.overwritten
    assert not target.exists()


def test_rename_choice_yields_new_distinct_path(tmp_path: Path, reporter, make_prompter) -> None:
    target = _existing_target(tmp_path)
    resolver = ConflictResolver(
        prompter=make_prompter(choices=["rename"], texts=["other"]), reporter=reporter, cwd=tmp_path
    )

    resolution = resolver.resolve(ScaffoldRequest.from_name("demo", cwd=tmp_path))

    assert resolution.renamed
    assert resolution.request.source_name == "other"
    assert resolution.request.target_path == (tmp_path / "other").resolve()
    assert resolution.request.target_path != target
    assert (target / "file.txt").read_text(encoding="utf-8") == "content"


def test_rename_rejects_blank_and_existing_names(tmp_path: Path, reporter, make_prompter) -> None:
    _existing_target(tmp_path)
    (tmp_path / "taken").mkdir()
    prompter = make_prompter(choices=["rename"], texts=["  ", "demo", "taken", "fresh"])
    resolver = ConflictResolver(prompter=prompter, reporter=reporter, cwd=tmp_path)

    resolution = resolver.resolve(ScaffoldRequest.from_name("demo", cwd=tmp_path))

    assert resolution.request.source_name == "fresh"
    assert len(prompter.text_calls) == 4


@pytest.mark.parametrize("answer", ["cancel", "something-else"])
def test_cancel_or_unknown_choice_aborts(
    tmp_path: Path, reporter, make_prompter, answer: str
) -> None:
    target = _existing_target(tmp_path)
    resolver = ConflictResolver(
        prompter=make_prompter(choices=[answer]), reporter=reporter, cwd=tmp_path
    )

    with pytest.raises(ConflictAbort):
        resolver.resolve(ScaffoldRequest.from_name("demo", cwd=tmp_path))

    assert (target / "file.txt").exists()


@pytest.mark.parametrize("error", [EOFError(), KeyboardInterrupt(), RuntimeError("tty gone")])
def test_prompt_errors_are_fatal_and_not_retried(
    tmp_path: Path, reporter, error: BaseException
) -> None:
    target = _existing_target(tmp_path)
    prompter = Mock()
    prompter.choose.side_effect = error
    resolver = ConflictResolver(prompter=prompter, reporter=reporter, cwd=tmp_path)

    with pytest.raises(ConflictAbort):
        resolver.resolve(ScaffoldRequest.from_name("demo", cwd=tmp_path))

    assert prompter.choose.call_count == 1
    assert target.exists()


def test_force_overwrite_failure_aborts(
    tmp_path: Path, reporter, make_prompter, monkeypatch: pytest.MonkeyPatch
) -> None:
    import repo_scaffold.scaffold.workflow.conflict as conflict

    def locked(path: Path) -> None:
        raise PermissionError(13, "Permission denied", str(path))

    target = _existing_target(tmp_path)
    monkeypatch.setattr(conflict, "remove_path", locked)
    resolver = ConflictResolver(prompter=make_prompter(), reporter=reporter, cwd=tmp_path)

    with pytest.raises(ConflictAbort, match="Could not remove"):
        resolver.resolve(ScaffoldRequest.from_name("demo", cwd=tmp_path, force_overwrite=True))

    assert target.exists()
