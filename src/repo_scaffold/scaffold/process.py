"""Subprocess helpers and the git identity reader.

Commands are always run with an explicit working directory; the process-wide
current directory is never changed.
"""

from __future__ import annotations

import logging
import shlex
import subprocess
from dataclasses import dataclass
from pathlib import Path

from repo_scaffold.scaffold.errors import CommandError

logger = logging.getLogger(__name__)


class CommandRunner:
    """Run external commands and return their stdout."""

    def run(self, command: list[str] | str, *, cwd: Path | None = None) -> str:
        args = shlex.split(command) if isinstance(command, str) else list(command)
        if not args:
            raise ValueError("command must not be empty")

        logger.debug("Running command", extra={"command": args, "cwd": str(cwd or "")})
        try:
            result = subprocess.run(
                args,
                cwd=cwd,
                capture_output=True,
                text=True,
            )
        except OSError as e:
            raise CommandError(args, returncode=None, stderr=str(e)) from e

        if result.returncode != 0:
            raise CommandError(args, returncode=result.returncode, stderr=result.stderr)
        return result.stdout


@dataclass(frozen=True, slots=True)
class GitIdentity:
    """User identity from the local git configuration."""

    name: str | None = None
    email: str | None = None

    @property
    def author(self) -> str:
        """`"Name <email>"` when both parts are known, otherwise empty."""

        if self.name and self.email:
            return f"{self.name} <{self.email}>"
        return ""


def _git_config_value(runner: CommandRunner, key: str) -> str | None:
    try:
        value = runner.run(["git", "config", key]).strip()
    except CommandError as e:
        # `git config` exits 1 for unset keys.
        logger.debug("Git config value unavailable", extra={"key": key, "error": str(e)})
        return None
    return value or None


def read_git_identity(runner: CommandRunner) -> GitIdentity:
    """Read `user.name` and `user.email`; absent values are never fatal."""

    identity = GitIdentity(
        name=_git_config_value(runner, "user.name"),
        email=_git_config_value(runner, "user.email"),
    )
    if not identity.author:
        logger.warning("Git user identity incomplete; author will be left empty")
    return identity
