#!/usr/bin/env python3
"""Programmatic scaffold example.

This demonstrates using the scaffold components directly:

* load settings from `.env`
* build an orchestrator for a project name in the current directory
* inspect the final state and the suggested next commands

The template reference is passed as an argument (not read from `.env`).
"""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Sequence

from repo_scaffold.scaffold.config import ScaffoldSettings
from repo_scaffold.scaffold.errors import ConflictAbort, ScaffoldError
from repo_scaffold.scaffold.logging import configure_logging
from repo_scaffold.scaffold.main import build_orchestrator
from repo_scaffold.scaffold.workflow.state_machine import ScaffoldRequest


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Scaffold a project (programmatic example).")
    parser.add_argument("--template", required=True, help='Template reference, e.g. "github:owner/name#main"')
    parser.add_argument("--name", required=True, help="Project name")
    parser.add_argument("--force", action="store_true", help="Overwrite an existing directory")
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)

    settings = ScaffoldSettings()
    configure_logging(settings.log_level)

    cwd = Path.cwd()
    request = ScaffoldRequest.from_name(args.name, cwd=cwd, force_overwrite=args.force)
    orchestrator = build_orchestrator(
        settings=settings,
        request=request,
        repo=args.template,
        clone=settings.clone,
        cwd=cwd,
    )

    try:
        outcome = orchestrator.run()
    except ConflictAbort:
        print("Cancelled")
        return 1
    except ScaffoldError as e:
        print(f"Failed: {e}")
        return 1

    print(f"state={outcome.state.value} path={outcome.project_path}")
    for command in outcome.next_commands:
        print(f"  {command}")
    print("history:", " -> ".join(snap.state.value for snap in orchestrator.history))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
