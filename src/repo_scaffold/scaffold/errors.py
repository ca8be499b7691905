"""Error taxonomy for the scaffold workflow.

Fatal errors abort the run with a non-zero exit status. `PartialCleanupError`
and `InstallError` are recovered by the orchestrator.
"""

from __future__ import annotations

from pathlib import Path


class ScaffoldError(RuntimeError):
    """Base class for every error raised by the scaffold workflow."""

    fatal: bool = True


class ConflictAbort(ScaffoldError):
    """The user cancelled, or prompting for a conflict decision failed."""


class FetchError(ScaffoldError):
    """The template could not be downloaded or extracted."""


class ManifestError(ScaffoldError):
    """The manifest is missing, malformed or could not be written."""


class VcsInitError(ScaffoldError):
    """`git init` failed in the target directory."""


class InstallError(ScaffoldError):
    """Dependency installation or the initial commit failed."""

    fatal = False


class PartialCleanupError(ScaffoldError):
    """One or more excluded paths could not be removed from the copy."""

    fatal = False

    def __init__(self, failures: dict[Path, BaseException]) -> None:
        self.failures = dict(failures)
        names = ", ".join(str(path) for path in self.failures)
        super().__init__(f"Failed to remove excluded paths: {names}")


class CommandError(ScaffoldError):
    """A subprocess exited with a non-zero status or could not be started."""

    def __init__(
        self,
        command: list[str],
        *,
        returncode: int | None,
        stderr: str = "",
    ) -> None:
        self.command = list(command)
        self.returncode = returncode
        self.stderr = stderr
        detail = stderr.strip() or "no output"
        if returncode is None:
            message = f"Command could not be started: {' '.join(command)} ({detail})"
        else:
            message = f"Command failed with exit code {returncode}: {' '.join(command)} ({detail})"
        super().__init__(message)


class CopyError(ScaffoldError):
    """The template could not be copied into the target directory."""
