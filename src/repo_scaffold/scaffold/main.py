"""CLI entrypoint for the scaffold command."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from repo_scaffold import __version__
from repo_scaffold.scaffold.config import ScaffoldSettings
from repo_scaffold.scaffold.console import ConsoleReporter
from repo_scaffold.scaffold.errors import ConflictAbort, ScaffoldError
from repo_scaffold.scaffold.fetch.client import TemplateFetcher, parse_template_ref
from repo_scaffold.scaffold.logging import configure_logging
from repo_scaffold.scaffold.process import CommandRunner
from repo_scaffold.scaffold.prompts import Prompter, RichPrompter
from repo_scaffold.scaffold.workflow.conflict import ConflictResolver
from repo_scaffold.scaffold.workflow.orchestrator import ScaffoldOptions, ScaffoldOrchestrator
from repo_scaffold.scaffold.workflow.state_machine import ScaffoldRequest

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="repo-scaffold",
        description="Create a new project from a remote template repository",
    )
    parser.add_argument("--version", action="version", version=f"repo-scaffold {__version__}")

    subparsers = parser.add_subparsers(dest="command", required=True)

    create = subparsers.add_parser("create", help="Create a new project")
    create.add_argument("name", help="Project name; also the directory created in the cwd")
    create.add_argument(
        "-f",
        "--force",
        action="store_true",
        help="Overwrite the target directory if it already exists",
    )
    create.add_argument(
        "--template",
        default=None,
        help="Template reference (overrides SCAFFOLD_TEMPLATE_REPO), e.g. 'github:owner/name#main'",
    )
    create.add_argument(
        "--clone",
        action="store_true",
        default=None,
        help="Fetch the template with `git clone` instead of downloading an archive",
    )

    return parser


def build_orchestrator(
    *,
    settings: ScaffoldSettings,
    request: ScaffoldRequest,
    repo: str,
    clone: bool,
    cwd: Path,
    reporter: ConsoleReporter | None = None,
    prompter: Prompter | None = None,
    runner: CommandRunner | None = None,
) -> ScaffoldOrchestrator:
    reporter = reporter or ConsoleReporter()
    runner = runner or CommandRunner()
    fetcher = TemplateFetcher(
        clone=clone,
        runner=runner,
        github_token=settings.github_token,
        github_base_url=settings.github_base_url,
    )
    resolver = ConflictResolver(
        prompter=prompter or RichPrompter(reporter.console),
        reporter=reporter,
        cwd=cwd,
    )
    options = ScaffoldOptions(
        manifest_file=settings.manifest_file,
        excludes=tuple(settings.excludes),
        install_command=settings.full_install_command,
        start_command=settings.start_command,
        commit_message=settings.commit_message,
    )
    return ScaffoldOrchestrator(
        request=request,
        repo=repo,
        temp_path=settings.temp_path,
        fetcher=fetcher,
        resolver=resolver,
        runner=runner,
        reporter=reporter,
        options=options,
    )


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = ScaffoldSettings()
    except ValidationError as e:
        # Logging isn't configured yet; keep it simple and actionable.
        print("Configuration error (check your .env):", file=sys.stderr)
        print(e, file=sys.stderr)
        return 2

    configure_logging(settings.log_level)

    repo = (args.template or settings.template_repo).strip()
    if not repo:
        print(
            "No template configured: pass --template or set SCAFFOLD_TEMPLATE_REPO",
            file=sys.stderr,
        )
        return 2
    try:
        parse_template_ref(repo)
    except ValueError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    cwd = Path.cwd()
    try:
        request = ScaffoldRequest.from_name(args.name, cwd=cwd, force_overwrite=args.force)
    except ValueError as e:
        print(f"Invalid project name: {e}", file=sys.stderr)
        return 2

    reporter = ConsoleReporter()
    orchestrator = build_orchestrator(
        settings=settings,
        request=request,
        repo=repo,
        clone=settings.clone if args.clone is None else args.clone,
        cwd=cwd,
        reporter=reporter,
    )

    try:
        orchestrator.run()
        return 0

    except ConflictAbort as e:
        logger.warning(str(e))
        reporter.error(str(e))
        return 1

    except ScaffoldError as e:
        reporter.info("")
        reporter.error(str(e))
        return 1

    except Exception:
        logger.exception("Command failed")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
