"""Scaffold command components.

Provides:
- Settings loaded from .env
- Structured logging
- A small CLI surface
- Template fetching, copying, manifest rewrite and project initialization
"""
