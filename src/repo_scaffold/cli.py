"""Console entrypoint shim.

The CLI is implemented in `repo_scaffold.scaffold.main`.
"""

from __future__ import annotations

from repo_scaffold.scaffold.main import main

__all__ = ["main"]


if __name__ == "__main__":
    raise SystemExit(main())
