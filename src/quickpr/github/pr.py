"""Pull request creation with generated descriptions.

Collects the diff, commit subjects and stat for ``base...head``, runs the
change classifier over them and renders the result as the PR body. When
there is nothing to classify it falls back to a plain commit/stat summary,
and failing that lets ``gh --fill`` write the body.
"""

from __future__ import annotations

import logging
import os
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import TextIO

from quickpr.analysis import ClassificationResult, classify_changes, render_description
from quickpr.config import ProjectConfig
from quickpr.github.gh import copilot_available, create_pull_request
from quickpr.github.git import get_commit_subjects, get_diff, get_diff_stat
from quickpr.ui.console import Console

logger = logging.getLogger("quickpr.pr")

STEP_SUMMARY_ENV = "GITHUB_STEP_SUMMARY"


@dataclass
class PROptions:
    """What the user asked for on the command line."""

    title: str | None = None
    body: str | None = None
    draft: bool = False
    copilot: bool = True


@contextmanager
def step_summary_sink(enabled: bool = True) -> Iterator[TextIO | None]:
    """Open the GitHub Actions step summary for appending, if there is one."""
    path = os.environ.get(STEP_SUMMARY_ENV)
    if not enabled or not path:
        yield None
        return
    try:
        handle = open(path, "a", encoding="utf-8")
    except OSError as e:
        logger.warning("Could not open step summary %s: %s", path, e)
        yield None
        return
    with handle:
        yield handle


@dataclass
class RangeAnalysis:
    """Classified changes for one ``base...head`` range."""

    base: str
    head: str
    commits: str
    file_stats: str
    result: ClassificationResult

    def render(self, sink: TextIO | None = None, max_files: int = 10) -> str:
        return render_description(
            self.commits, self.file_stats, self.result, sink=sink, max_files=max_files,
        )


def analyze_range(
    base: str,
    head: str,
    config: ProjectConfig | None = None,
    cwd: Path | None = None,
) -> RangeAnalysis | None:
    """Collect git output for the range and classify it. None if there is no diff."""
    config = config or ProjectConfig()
    timeout = config.git.timeout

    diff_text = get_diff(base, head, cwd=cwd, timeout=timeout)
    if not diff_text:
        return None

    commits = get_commit_subjects(base, head, cwd=cwd, timeout=timeout)
    file_stats = get_diff_stat(base, head, cwd=cwd, timeout=timeout)
    result = classify_changes(diff_text, commits, file_stats)
    logger.info("Classified %s...%s as %s", base, head, result.severity.value)

    return RangeAnalysis(
        base=base, head=head, commits=commits, file_stats=file_stats, result=result,
    )


def generate_pr_description(
    base: str,
    head: str,
    console: Console,
    config: ProjectConfig | None = None,
    cwd: Path | None = None,
    sink: TextIO | None = None,
) -> str | None:
    """Classify the changes between `base` and `head` and render a PR body.

    Returns None when the range has no diff.
    """
    config = config or ProjectConfig()

    with console.status("Analyzing changes..."):
        analysis = analyze_range(base, head, config=config, cwd=cwd)
        if analysis is None:
            console.warning("No changes detected")
            return None

        if copilot_available(cwd):
            logger.debug("gh copilot available")
        else:
            console.warning("GitHub Copilot CLI not available, using heuristic analysis")

        description = analysis.render(sink=sink, max_files=config.pr.max_files_listed)

    level = analysis.result.severity.value
    console.success(f"PR description generated (severity: {level})")
    if sink is not None:
        console.success("Summary written to GitHub Actions step summary")
    console.show_description(description)
    return description


def generate_summary(
    base: str,
    head: str,
    cwd: Path | None = None,
    timeout: int = 30,
) -> str | None:
    """Plain commit list and file stats, used when there is no classifiable diff."""
    commits = get_commit_subjects(base, head, cwd=cwd, bullet=True, timeout=timeout)
    stats = get_diff_stat(base, head, cwd=cwd, timeout=timeout)
    if not commits and not stats:
        return None

    summary = ""
    if commits:
        summary += "## Changes\n\n" + commits + "\n\n"
    if stats:
        summary += "## File Stats\n\n" + stats
    return summary


def create_pr(
    base: str,
    head: str,
    options: PROptions,
    console: Console,
    config: ProjectConfig | None = None,
    cwd: Path | None = None,
) -> None:
    """Open a PR from `head` into `base`. Raises GitHubCLIError if gh fails."""
    config = config or ProjectConfig()
    console.info(f"Creating PR from {head} to {base}...")

    description = None
    if not options.body and options.copilot:
        with step_summary_sink(config.step_summary) as sink:
            description = generate_pr_description(
                base, head, console, config=config, cwd=cwd, sink=sink,
            )
        if description is None:
            description = generate_summary(base, head, cwd=cwd, timeout=config.git.timeout)
            if description:
                console.success("Summary generated from changes")

    body_file = _write_body_file(description) if description else None
    try:
        create_pull_request(
            base, head,
            title=options.title,
            draft=options.draft,
            body=options.body,
            body_file=body_file,
            cwd=cwd,
        )
    finally:
        if body_file is not None:
            body_file.unlink(missing_ok=True)

    console.success("PR created successfully!")


def _write_body_file(description: str) -> Path:
    """Write the body to a temp file so gh keeps the Markdown intact."""
    with tempfile.NamedTemporaryFile(
        "w", encoding="utf-8", prefix="pr-body-", suffix=".md", delete=False,
    ) as f:
        f.write(description)
    return Path(f.name)
