from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from pathlib import Path


class ScaffoldState(str, Enum):
    START = "start"
    CONFLICT_CHECK = "conflict_check"
    PROCEED = "proceed"
    RENAMED = "renamed"
    ABORT = "abort"
    FETCH = "fetch"
    COPY = "copy"
    MANIFEST = "manifest"
    VCS_INIT = "vcs_init"
    INSTALL = "install"
    DONE = "done"
    DONE_DEGRADED = "done_degraded"
    FAILED = "failed"


TERMINAL_STATES: frozenset[ScaffoldState] = frozenset(
    {
        ScaffoldState.ABORT,
        ScaffoldState.DONE,
        ScaffoldState.DONE_DEGRADED,
        ScaffoldState.FAILED,
    }
)


ALLOWED_TRANSITIONS: dict[ScaffoldState, set[ScaffoldState]] = {
    ScaffoldState.START: {ScaffoldState.CONFLICT_CHECK},
    ScaffoldState.CONFLICT_CHECK: {
        ScaffoldState.PROCEED,
        ScaffoldState.RENAMED,
        ScaffoldState.ABORT,
    },
    ScaffoldState.PROCEED: {ScaffoldState.FETCH},
    ScaffoldState.RENAMED: {ScaffoldState.FETCH},
    ScaffoldState.FETCH: {ScaffoldState.COPY, ScaffoldState.FAILED},
    ScaffoldState.COPY: {ScaffoldState.MANIFEST, ScaffoldState.FAILED},
    ScaffoldState.MANIFEST: {ScaffoldState.VCS_INIT, ScaffoldState.FAILED},
    ScaffoldState.VCS_INIT: {ScaffoldState.INSTALL, ScaffoldState.FAILED},
    ScaffoldState.INSTALL: {ScaffoldState.DONE, ScaffoldState.DONE_DEGRADED},
}


class IllegalTransitionError(ValueError):
    pass


@dataclass(frozen=True, slots=True)
class ScaffoldRequest:
    """What to scaffold and where.

    `source_name` and `target_path` change together, and only when the user
    renames the project during conflict resolution.
    """

    source_name: str
    target_path: Path
    force_overwrite: bool = False

    @staticmethod
    def from_name(name: str, *, cwd: Path, force_overwrite: bool = False) -> ScaffoldRequest:
        cleaned = name.strip()
        if not cleaned:
            raise ValueError("project name must not be empty")
        return ScaffoldRequest(
            source_name=cleaned,
            target_path=(cwd / cleaned).resolve(),
            force_overwrite=force_overwrite,
        )

    def renamed(self, name: str, *, cwd: Path) -> ScaffoldRequest:
        renamed = ScaffoldRequest.from_name(name, cwd=cwd, force_overwrite=self.force_overwrite)
        return replace(self, source_name=renamed.source_name, target_path=renamed.target_path)


@dataclass(frozen=True, slots=True)
class RepoMap:
    """The three locations threaded through every step."""

    repo: str
    temp: Path
    target: Path


@dataclass(frozen=True, slots=True)
class ScaffoldSnapshot:
    state: ScaffoldState
    request: ScaffoldRequest

    def to_json(self) -> dict[str, object]:
        return {
            "state": self.state.value,
            "source_name": self.request.source_name,
            "target_path": str(self.request.target_path),
            "force_overwrite": self.request.force_overwrite,
        }


def transition(
    *,
    current: ScaffoldSnapshot,
    to: ScaffoldState,
    request: ScaffoldRequest | None = None,
) -> ScaffoldSnapshot:
    allowed = ALLOWED_TRANSITIONS.get(current.state, set())
    if to not in allowed:
        raise IllegalTransitionError(f"Illegal transition: {current.state.value} -> {to.value}")
    return ScaffoldSnapshot(state=to, request=request or current.request)
