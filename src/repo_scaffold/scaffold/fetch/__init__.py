"""Template fetching (archive download or git clone)."""

from repo_scaffold.scaffold.fetch.client import (
    TemplateFetcher,
    TemplateRef,
    parse_template_ref,
)

__all__ = ["TemplateFetcher", "TemplateRef", "parse_template_ref"]
