"""Conflict resolution for an already existing target directory.

`decide_conflict` is a pure function of (exists, force). Only the `PROMPT`
decision involves the user, through an injected `Prompter`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from repo_scaffold.scaffold.console import ConsoleReporter
from repo_scaffold.scaffold.errors import ConflictAbort
from repo_scaffold.scaffold.files import path_exists, remove_path
from repo_scaffold.scaffold.prompts import Prompter

from .state_machine import ScaffoldRequest

logger = logging.getLogger(__name__)


class ConflictDecision(str, Enum):
    PROCEED = "proceed"
    OVERWRITE = "overwrite"
    PROMPT = "prompt"


class ConflictChoice(str, Enum):
    OVERWRITE = "overwrite"
    RENAME = "rename"
    CANCEL = "cancel"


CONFLICT_CHOICES: dict[str, str] = {
    ConflictChoice.OVERWRITE.value: "Overwrite the existing directory",
    ConflictChoice.RENAME.value: "Choose a new project name",
    ConflictChoice.CANCEL.value: "Cancel",
}


def decide_conflict(*, exists: bool, force: bool) -> ConflictDecision:
    if force:
        return ConflictDecision.OVERWRITE
    if not exists:
        return ConflictDecision.PROCEED
    return ConflictDecision.PROMPT


@dataclass(frozen=True, slots=True)
class ConflictResolution:
    request: ScaffoldRequest
    renamed: bool = False
    overwritten: bool = False


class ConflictResolver:
    """Decide how to proceed before any destructive action is taken."""

    def __init__(
        self,
        *,
        prompter: Prompter,
        reporter: ConsoleReporter | None = None,
        cwd: Path | None = None,
    ) -> None:
        self._prompter = prompter
        self._reporter = reporter or ConsoleReporter()
        self._cwd = cwd

    def resolve(self, request: ScaffoldRequest) -> ConflictResolution:
        """Resolve a conflict on `request.target_path`.

        Raises:
            ConflictAbort: the user cancelled or prompting failed.
        """

        target = request.target_path
        decision = decide_conflict(exists=path_exists(target), force=request.force_overwrite)
        logger.debug(
            "Conflict decision",
            extra={"target": str(target), "decision": decision.value},
        )

        if decision is ConflictDecision.PROCEED:
            return ConflictResolution(request=request)

        if decision is ConflictDecision.OVERWRITE:
            self._overwrite(target)
            return ConflictResolution(request=request, overwritten=True)

        try:
            choice = self._prompter.choose(
                f"Target directory {target} already exists. What would you like to do?",
                CONFLICT_CHOICES,
                default=ConflictChoice.CANCEL.value,
            )
            if choice == ConflictChoice.OVERWRITE.value:
                self._overwrite(target)
                return ConflictResolution(request=request, overwritten=True)
            if choice == ConflictChoice.RENAME.value:
                return ConflictResolution(request=self._ask_new_name(request), renamed=True)
        except ConflictAbort:
            raise
        except (Exception, KeyboardInterrupt) as e:
            logger.error("Conflict prompt failed", extra={"target": str(target), "error": repr(e)})
            raise ConflictAbort(f"Conflict resolution failed: {e!r}") from e

        raise ConflictAbort(f"Cancelled: {target} already exists")

    def _overwrite(self, target: Path) -> None:
        try:
            remove_path(target)
        except OSError as e:
            logger.error("Overwrite failed", extra={"target": str(target), "error": repr(e)})
            raise ConflictAbort(f"Could not remove existing {target}: {e}") from e

    def _ask_new_name(self, request: ScaffoldRequest) -> ScaffoldRequest:
        cwd = self._cwd or Path.cwd()
        while True:
            name = self._prompter.ask_text("Please enter a new project name").strip()
            if not name:
                self._reporter.warning("The project name must not be empty.")
                continue
            candidate = request.renamed(name, cwd=cwd)
            if candidate.target_path == request.target_path or path_exists(candidate.target_path):
                self._reporter.warning(f"{candidate.target_path} already exists, pick another name.")
                continue
            logger.info(
                "Project renamed",
                extra={"source_name": candidate.source_name, "target": str(candidate.target_path)},
            )
            return candidate
