"""GitHub CLI (`gh`) wrappers."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from quickpr.exceptions import GitHubCLIError

logger = logging.getLogger("quickpr.gh")

PROBE_TIMEOUT = 15


def copilot_available(cwd: Path | None = None) -> bool:
    """Whether the gh-copilot extension is installed and runnable."""
    cmd = ["gh", "copilot", "--help"]
    logger.debug("probe: %s", " ".join(cmd))
    try:
        result = subprocess.run(
            cmd, cwd=cwd, capture_output=True,
            encoding="utf-8", errors="replace", timeout=PROBE_TIMEOUT,
        )
    except (subprocess.TimeoutExpired, FileNotFoundError):
        return False
    return result.returncode == 0


def build_pr_create_args(
    base: str,
    head: str,
    title: str | None = None,
    draft: bool = False,
    body: str | None = None,
    body_file: Path | None = None,
) -> list[str]:
    """Assemble a ``gh pr create`` command line.

    An explicit `body` wins over `body_file`; with neither, ``--fill`` lets gh
    build the description from the commits.
    """
    cmd = ["gh", "pr", "create", "--base", base, "--head", head]
    if draft:
        cmd.append("--draft")
    if title:
        cmd += ["--title", title]
    if body:
        cmd += ["--body", body]
    elif body_file is not None:
        cmd += ["--body-file", str(body_file)]
    else:
        cmd.append("--fill")
    return cmd


def create_pull_request(
    base: str,
    head: str,
    title: str | None = None,
    draft: bool = False,
    body: str | None = None,
    body_file: Path | None = None,
    cwd: Path | None = None,
) -> None:
    """Open a pull request, attached to the terminal. Raises GitHubCLIError."""
    cmd = build_pr_create_args(base, head, title=title, draft=draft, body=body, body_file=body_file)
    logger.debug("call: %s", " ".join(cmd))
    try:
        result = subprocess.run(cmd, cwd=cwd)
    except FileNotFoundError as e:
        raise GitHubCLIError(cmd, "gh executable not found") from e
    if result.returncode != 0:
        raise GitHubCLIError(cmd, f"exit code {result.returncode}", returncode=result.returncode)
