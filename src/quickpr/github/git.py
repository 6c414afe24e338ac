"""Thin wrappers around the git commands quickpr needs.

Query helpers (branch names, diffs, logs) return ``None`` or ``""`` when git
fails, so callers can fall back. Commands that change the repository or the
remote (commit, push) run attached to the terminal so the user sees git's own
output, and raise :class:`GitError` when they fail.
"""

from __future__ import annotations

import logging
import re
import subprocess
from pathlib import Path

from quickpr.exceptions import GitError

logger = logging.getLogger("quickpr.git")

DEFAULT_TIMEOUT = 30
DEFAULT_REMOTE = "origin"


def run_git(
    args: list[str],
    cwd: Path | None = None,
    timeout: int = DEFAULT_TIMEOUT,
) -> str | None:
    """Run a git command and return its stripped stdout, or None on failure."""
    cmd = ["git", *args]
    logger.debug("run: %s", " ".join(cmd))
    try:
        result = subprocess.run(
            cmd,
            cwd=cwd,
            capture_output=True,
            encoding="utf-8",
            errors="replace",
            timeout=timeout,
        )
    except (subprocess.TimeoutExpired, FileNotFoundError) as e:
        logger.debug("git unavailable or timed out: %s", e)
        return None
    if result.returncode != 0:
        logger.debug("exit %d: %s", result.returncode, (result.stderr or "").strip())
        return None
    return result.stdout.strip()


def call_git(args: list[str], cwd: Path | None = None) -> None:
    """Run a git command attached to the terminal; raise GitError on failure."""
    cmd = ["git", *args]
    logger.debug("call: %s", " ".join(cmd))
    try:
        result = subprocess.run(cmd, cwd=cwd)
    except FileNotFoundError as e:
        raise GitError(cmd, "git executable not found") from e
    if result.returncode != 0:
        raise GitError(cmd, f"exit code {result.returncode}", returncode=result.returncode)


def get_current_branch(cwd: Path | None = None) -> str | None:
    """Name of the checked-out branch; None when detached or outside a repo."""
    return run_git(["branch", "--show-current"], cwd=cwd) or None


def get_default_branch(cwd: Path | None = None, remote: str = DEFAULT_REMOTE) -> str | None:
    """Work out which branch PRs should target.

    Asks the remote first (its HEAD symref, then ``git remote show``), then
    falls back to whichever of main/master exists locally, on the remote, or
    in branch config.
    """
    remote_head = run_git(["symbolic-ref", f"refs/remotes/{remote}/HEAD"], cwd=cwd)
    if remote_head:
        match = re.match(rf"refs/remotes/{re.escape(remote)}/(.+)", remote_head)
        if match:
            return match.group(1)

    remote_info = run_git(["remote", "show", remote], cwd=cwd)
    if remote_info:
        match = re.search(r"HEAD branch:\s*(.+)", remote_info)
        if match and match.group(1).strip() != "(unknown)":
            return match.group(1).strip()

    for ref_prefix in ("refs/heads", f"refs/remotes/{remote}"):
        for name in ("main", "master"):
            if run_git(["show-ref", "--verify", f"{ref_prefix}/{name}"], cwd=cwd) is not None:
                return name

    for name in ("main", "master"):
        if run_git(["config", "--get", f"branch.{name}.merge"], cwd=cwd):
            return name

    return None


def push_branch(
    branch: str,
    cwd: Path | None = None,
    remote: str = DEFAULT_REMOTE,
    set_upstream: bool = True,
) -> None:
    """Push a branch, setting its upstream by default."""
    args = ["push", "-u", remote, branch] if set_upstream else ["push", remote, branch]
    call_git(args, cwd=cwd)


def commit_all(message: str, cwd: Path | None = None) -> None:
    """Commit every tracked modification (``git commit -am``)."""
    call_git(["commit", "-am", message], cwd=cwd)


def commit_and_push(
    message: str,
    branch: str,
    cwd: Path | None = None,
    remote: str = DEFAULT_REMOTE,
) -> None:
    """Stage everything, commit with `message`, and push `branch`."""
    call_git(["add", "-A"], cwd=cwd)
    call_git(["commit", "-m", message], cwd=cwd)
    call_git(["push", remote, branch], cwd=cwd)


def force_commit_and_push(
    branch: str,
    cwd: Path | None = None,
    remote: str = DEFAULT_REMOTE,
) -> None:
    """Fold all changes into the last commit and force-push `branch`."""
    call_git(["add", "-A"], cwd=cwd)
    call_git(["commit", "--amend", "--no-edit"], cwd=cwd)
    call_git(["push", remote, branch, "--force"], cwd=cwd)


def get_diff(base: str, head: str, cwd: Path | None = None, timeout: int = DEFAULT_TIMEOUT) -> str:
    """Unified diff of `head` against its merge base with `base`."""
    return run_git(["diff", f"{base}...{head}"], cwd=cwd, timeout=timeout) or ""


def get_diff_stat(base: str, head: str, cwd: Path | None = None, timeout: int = DEFAULT_TIMEOUT) -> str:
    """``git diff --stat`` for the same range as :func:`get_diff`."""
    return run_git(["diff", "--stat", f"{base}...{head}"], cwd=cwd, timeout=timeout) or ""


def get_commit_subjects(
    base: str,
    head: str,
    cwd: Path | None = None,
    bullet: bool = False,
    timeout: int = DEFAULT_TIMEOUT,
) -> str:
    """Subjects of the commits on `head` that are not on `base`, one per line."""
    fmt = "- %s" if bullet else "%s"
    return run_git(
        ["log", f"--pretty=format:{fmt}", f"{base}..{head}"], cwd=cwd, timeout=timeout,
    ) or ""
