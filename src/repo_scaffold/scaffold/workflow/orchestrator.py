"""Scaffold orchestration.

Runs the workflow strictly in order:

1. resolve a target directory conflict
2. fetch the template into the temp directory
3. copy it into the target and strip excluded paths
4. rewrite the manifest
5. `git init` in the target
6. install dependencies and make the initial commit

Steps 2-5 are fatal on failure. Step 6 degrades to printing the manual
recovery commands.
"""

from __future__ import annotations

import logging
import shlex
from dataclasses import dataclass, field
from pathlib import Path

from repo_scaffold.scaffold.console import ConsoleReporter
from repo_scaffold.scaffold.errors import (
    CommandError,
    ConflictAbort,
    CopyError,
    FetchError,
    InstallError,
    PartialCleanupError,
    ScaffoldError,
    VcsInitError,
)
from repo_scaffold.scaffold.fetch.client import TemplateFetcher
from repo_scaffold.scaffold.files import copy_template, remove_path
from repo_scaffold.scaffold.manifest import rewrite_manifest
from repo_scaffold.scaffold.process import CommandRunner, read_git_identity

from .conflict import ConflictResolver
from .state_machine import (
    RepoMap,
    ScaffoldRequest,
    ScaffoldSnapshot,
    ScaffoldState,
    transition,
)

logger = logging.getLogger(__name__)

DEFAULT_EXCLUDES: tuple[str, ...] = (".git", "changelogs")


@dataclass(frozen=True, slots=True)
class ScaffoldOptions:
    manifest_file: str = "package.json"
    excludes: tuple[str, ...] = DEFAULT_EXCLUDES
    install_command: str = "npm install"
    start_command: str = "npm run serve"
    commit_message: str = "init: initialize project skeleton"


@dataclass(frozen=True, slots=True)
class ScaffoldOutcome:
    state: ScaffoldState
    project_path: Path
    project_name: str
    next_commands: list[str] = field(default_factory=list)

    @property
    def degraded(self) -> bool:
        return self.state is ScaffoldState.DONE_DEGRADED


class ScaffoldOrchestrator:
    """Owns the sequential workflow and its error/exit policy."""

    def __init__(
        self,
        *,
        request: ScaffoldRequest,
        repo: str,
        temp_path: Path,
        fetcher: TemplateFetcher,
        resolver: ConflictResolver,
        runner: CommandRunner | None = None,
        reporter: ConsoleReporter | None = None,
        options: ScaffoldOptions | None = None,
    ) -> None:
        self.request = request
        self.repo_map = RepoMap(repo=repo, temp=temp_path, target=request.target_path)
        self.fetcher = fetcher
        self.resolver = resolver
        self.runner = runner or CommandRunner()
        self.reporter = reporter or ConsoleReporter()
        self.options = options or ScaffoldOptions()
        self.snapshot = ScaffoldSnapshot(state=ScaffoldState.START, request=request)
        self.history: list[ScaffoldSnapshot] = [self.snapshot]

    @property
    def state(self) -> ScaffoldState:
        return self.snapshot.state

    def _advance(self, to: ScaffoldState, request: ScaffoldRequest | None = None) -> None:
        self.snapshot = transition(current=self.snapshot, to=to, request=request)
        self.history.append(self.snapshot)
        logger.debug("Scaffold state changed", extra=self.snapshot.to_json())

    def run(self) -> ScaffoldOutcome:
        """Run every step in order.

        Raises:
            ScaffoldError: a fatal step failed (`ConflictAbort`, `FetchError`,
                `ManifestError` or `VcsInitError`).
        """

        logger.info(
            "Starting scaffold",
            extra={"repo": self.repo_map.repo, "target": str(self.repo_map.target)},
        )
        self.resolve_conflict()

        step = ScaffoldState.FETCH
        try:
            self._advance(ScaffoldState.FETCH)
            self.fetch_template()
            step = ScaffoldState.COPY
            self._advance(ScaffoldState.COPY)
            self.copy_template_files()
            step = ScaffoldState.MANIFEST
            self._advance(ScaffoldState.MANIFEST)
            self.update_manifest()
            step = ScaffoldState.VCS_INIT
            self._advance(ScaffoldState.VCS_INIT)
            self.init_git()
        except ScaffoldError:
            logger.error("Scaffold step failed", extra={"step": step.value}, exc_info=True)
            self._advance(ScaffoldState.FAILED)
            raise

        self._advance(ScaffoldState.INSTALL)
        return self.install_and_commit()

    def resolve_conflict(self) -> None:
        self._advance(ScaffoldState.CONFLICT_CHECK)
        try:
            resolution = self.resolver.resolve(self.request)
        except ConflictAbort:
            self._advance(ScaffoldState.ABORT)
            raise

        if resolution.renamed:
            self.request = resolution.request
            self.repo_map = RepoMap(
                repo=self.repo_map.repo,
                temp=self.repo_map.temp,
                target=self.request.target_path,
            )
            self._advance(ScaffoldState.RENAMED, request=self.request)
        else:
            self._advance(ScaffoldState.PROCEED)

    def fetch_template(self) -> None:
        temp = self.repo_map.temp
        with self.reporter.step("Fetching project template...", "Template downloaded"):
            try:
                remove_path(temp)
            except OSError as e:
                raise FetchError(f"Failed to clear temp directory {temp}: {e}") from e
            self.fetcher.fetch(self.repo_map.repo, temp)

    def copy_template_files(self) -> None:
        temp, target = self.repo_map.temp, self.repo_map.target
        with self.reporter.step("Copying template files...", "Template files copied"):
            try:
                copy_template(temp, target, self.options.excludes)
            except PartialCleanupError as e:
                logger.warning(
                    str(e),
                    extra={"failures": {str(p): repr(exc) for p, exc in e.failures.items()}},
                )
                self.reporter.warning(str(e))
            except (OSError, ValueError) as e:
                raise CopyError(f"Failed to copy template into {target}: {e}") from e

        try:
            remove_path(temp)
        except OSError as e:
            logger.warning("Failed to remove temp directory", extra={"temp": str(temp), "error": str(e)})

    def update_manifest(self) -> dict[str, object]:
        manifest_path = self.repo_map.target / self.options.manifest_file
        with self.reporter.step(
            f"Updating {self.options.manifest_file}...",
            f"{self.options.manifest_file} updated",
        ):
            identity = read_git_identity(self.runner)
            return rewrite_manifest(manifest_path, name=self.request.source_name, identity=identity)

    def init_git(self) -> None:
        target = self.repo_map.target
        with self.reporter.step("Initializing git repository...", "Git repository initialized"):
            try:
                self.runner.run(["git", "init"], cwd=target)
            except CommandError as e:
                raise VcsInitError(f"git init failed in {target}: {e}") from e

    def _install(self) -> None:
        target = self.repo_map.target
        try:
            self.runner.run(shlex.split(self.options.install_command), cwd=target)
            self.runner.run(["git", "add", "."], cwd=target)
            self.runner.run(["git", "commit", "-m", self.options.commit_message], cwd=target)
        except CommandError as e:
            raise InstallError(str(e)) from e

    def install_and_commit(self) -> ScaffoldOutcome:
        name = self.request.source_name
        cd_command = f"cd {shlex.quote(name)}"
        try:
            with self.reporter.step(
                "Installing project dependencies, please wait...",
                "Dependencies installed",
            ):
                self._install()
        except InstallError as e:
            logger.warning("Dependency installation failed", extra={"error": str(e)})
            commands = [cd_command, self.options.install_command]
            self.reporter.info("Installation failed, please run the following commands manually:\n")
            for command in commands:
                self.reporter.success(f"   {command}")
            self._advance(ScaffoldState.DONE_DEGRADED)
            return ScaffoldOutcome(
                state=ScaffoldState.DONE_DEGRADED,
                project_path=self.repo_map.target,
                project_name=name,
                next_commands=commands,
            )

        commands = [cd_command, self.options.start_command]
        self.reporter.info("Run the following commands to start the project:\n")
        for command in commands:
            self.reporter.success(f"   {command}")
        self._advance(ScaffoldState.DONE)
        logger.info("Scaffold completed", extra={"target": str(self.repo_map.target)})
        return ScaffoldOutcome(
            state=ScaffoldState.DONE,
            project_path=self.repo_map.target,
            project_name=name,
            next_commands=commands,
        )
