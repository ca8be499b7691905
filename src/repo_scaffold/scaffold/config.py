"""Configuration for the scaffold command.

Configuration is loaded from:
- environment variables
- and a local `.env` file (if present)

Scaffold specific variables use the `SCAFFOLD_` prefix. `GITHUB_TOKEN` is
optional and only used to look up default branches of private templates.
"""

from __future__ import annotations

import tempfile
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _default_temp_path() -> Path:
    return Path(tempfile.gettempdir()) / "repo-scaffold" / "__temp__"


class ScaffoldSettings(BaseSettings):
    """Settings for the scaffold command.

    Environment variables:
    - SCAFFOLD_TEMPLATE_REPO   (required unless `--template` is passed)
    - SCAFFOLD_TEMP_PATH       (optional)
    - SCAFFOLD_CLONE           (optional)
    - SCAFFOLD_EXCLUDES        (optional, JSON list)
    - SCAFFOLD_INSTALL_COMMAND (optional)
    - SCAFFOLD_REGISTRY        (optional)
    - GITHUB_TOKEN             (optional)
    - LOG_LEVEL                (optional)

    Notes:
        Pydantic-settings supports overriding the env file in tests via:
        `ScaffoldSettings(_env_file=path_to_env)`.
    """

    template_repo: str = Field(
        default="",
        validation_alias="SCAFFOLD_TEMPLATE_REPO",
        description="Template reference, e.g. 'github:owner/name#branch' or 'direct:<zip url>'",
    )
    temp_path: Path = Field(
        default_factory=_default_temp_path,
        validation_alias="SCAFFOLD_TEMP_PATH",
        description="Scratch directory the template is downloaded into",
    )
    clone: bool = Field(
        default=False,
        validation_alias="SCAFFOLD_CLONE",
        description="Use `git clone` instead of downloading an archive",
    )
    excludes: list[str] = Field(
        default_factory=lambda: [".git", "changelogs"],
        validation_alias="SCAFFOLD_EXCLUDES",
        description="Paths removed from the copied template",
    )
    manifest_file: str = Field(
        default="package.json",
        validation_alias="SCAFFOLD_MANIFEST_FILE",
        description="Manifest rewritten with the project metadata",
    )

    install_command: str = Field(
        default="npm install",
        validation_alias="SCAFFOLD_INSTALL_COMMAND",
        description="Command used to install the project dependencies",
    )
    registry: str = Field(
        default="",
        validation_alias="SCAFFOLD_REGISTRY",
        description="Optional package registry passed as `--registry=<url>`",
    )
    start_command: str = Field(
        default="npm run serve",
        validation_alias="SCAFFOLD_START_COMMAND",
        description="Command suggested to the user once the project is ready",
    )
    commit_message: str = Field(
        default="init: initialize project skeleton",
        validation_alias="SCAFFOLD_COMMIT_MESSAGE",
        description="Message of the initial commit",
    )

    github_token: str = Field(
        default="",
        validation_alias="GITHUB_TOKEN",
        description="GitHub token used for default branch lookups",
    )
    github_base_url: str = Field(
        default="https://api.github.com",
        validation_alias="GITHUB_BASE_URL",
        description="GitHub API base URL (useful for GitHub Enterprise)",
    )

    log_level: str = Field(
        default="WARNING",
        validation_alias="LOG_LEVEL",
        description="Root logging level",
    )

    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("install_command", "start_command")
    @classmethod
    def _require_command(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("command must not be empty")
        return value.strip()

    @property
    def full_install_command(self) -> str:
        """Install command including the registry override (if any)."""

        if self.registry.strip():
            return f"{self.install_command} --registry={self.registry.strip()}"
        return self.install_command
