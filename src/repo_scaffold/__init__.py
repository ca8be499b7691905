"""Repo Scaffold.

Creates a new project from a remote template repository:
- configuration loaded from `.env`
- structured logging
- interactive handling of an existing target directory
"""

__version__ = "0.1.0"

from repo_scaffold.scaffold.config import ScaffoldSettings

__all__ = ["__version__", "ScaffoldSettings"]
