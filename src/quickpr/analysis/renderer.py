"""Markdown renderer for pull request descriptions.

Produces the body that ``qpr`` attaches to a new PR:
  - Summary line with file and line counts
  - Severity level, reasoning and metrics
  - Commit list and modified files
  - Impact areas and risk notes
"""

from __future__ import annotations

import re
from typing import Protocol

from quickpr.analysis.models import ClassificationResult

DEFAULT_MAX_FILES = 10

_STAT_SUMMARY_RE = re.compile(r"\d+ files? changed")


class TextSink(Protocol):
    """Anything that text can be appended to (an open file, a StringIO...)."""

    def write(self, text: str) -> int: ...


def render_description(
    commits: str | None,
    file_stats: str | None,
    result: ClassificationResult,
    sink: TextSink | None = None,
    max_files: int = DEFAULT_MAX_FILES,
) -> str:
    """Render the PR description for a classified change set.

    If ``sink`` is given, the description is also appended to it under a
    ``# PR Analysis`` heading (this is how the GitHub Actions step summary
    gets written).
    """
    metrics = result.metrics
    sections = [
        "## Summary",
        f"This PR introduces changes across {metrics.files_changed} file(s) "
        f"with {metrics.insertions} insertions and {metrics.deletions} deletions.",
        "",
        f"## Severity: {result.severity.value}",
        f"**Reasoning:** {result.reasoning}",
        "",
        "**Metrics:**",
        f"- Lines Changed: {metrics.lines_changed}",
        f"- Files Modified: {metrics.files_changed}",
        f"- Insertions: +{metrics.insertions}",
        f"- Deletions: -{metrics.deletions}",
        "",
        "## Changes Made",
        _bullets(_commit_lines(commits), "No commits"),
        "",
        "## Files Modified",
        _bullets(_file_lines(file_stats, max_files), "No files"),
        "",
        "## Impact Analysis",
        _bullets(list(result.impact_areas), "General code improvements and maintenance"),
        "",
        "## Risks & Considerations",
        _bullets(list(result.risks), ""),
        "",
        _footer(),
    ]
    description = "\n".join(sections)

    if sink is not None:
        sink.write(f"\n# PR Analysis\n\n{description}\n")

    return description


def _commit_lines(commits: str | None) -> list[str]:
    if not commits:
        return []
    return [c for c in commits.split("\n") if c.strip()]


def _file_lines(file_stats: str | None, max_files: int) -> list[str]:
    """Per-file stat lines, skipping the trailing "N files changed" summary."""
    if not file_stats:
        return []
    files = [
        f.strip() for f in file_stats.split("\n")
        if f.strip() and not _STAT_SUMMARY_RE.search(f)
    ]
    return files[:max_files]


def _bullets(items: list[str], placeholder: str) -> str:
    if not items:
        return f"- {placeholder}" if placeholder else ""
    return "\n".join(f"- {item}" for item in items)


def _footer() -> str:
    return "---\n*Generated with GitHub Copilot analysis*"
