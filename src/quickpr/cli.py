"""Command-line interface for quickpr."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

import click
from rich.console import Console as RichConsole
from rich.logging import RichHandler

from quickpr import __version__
from quickpr.config import (
    ProjectConfig,
    find_project_root,
    load_config,
    save_config,
    set_config_value,
)
from quickpr.exceptions import ConfigError, GitError, GitHubCLIError, WorkflowError
from quickpr.ui.console import Console

console = Console()

GH_TIPS = [
    "brew install gh  # Mac",
    "gh auth login",
]
COPILOT_TIPS = ["gh extension install github/gh-copilot"]


def _configure_logging(verbose: bool) -> None:
    logger = logging.getLogger("quickpr")
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.addHandler(RichHandler(console=RichConsole(stderr=True), show_path=False))
    logger.propagate = False


def _get_project_root(path: str | None = None) -> Path:
    """Project root: explicit path, nearest .qpr directory, or the cwd."""
    if path:
        root = Path(path).resolve()
        if not root.exists():
            console.error(f"Path does not exist: {path}")
            sys.exit(1)
        return root
    return find_project_root() or Path.cwd()


def _load_config(root: Path) -> ProjectConfig:
    try:
        return load_config(root)
    except ConfigError as e:
        console.error(str(e))
        sys.exit(1)


def _require_branch(root: Path) -> str:
    from quickpr.github.git import get_current_branch

    branch = get_current_branch(cwd=root)
    if not branch:
        console.error("Not on a git branch")
        sys.exit(1)
    return branch


@click.group()
@click.version_option(version=__version__, prog_name="qpr")
@click.option("--verbose", "-v", is_flag=True, help="Log every git/gh command.")
def main(verbose: bool):
    """Quickly create GitHub PRs with generated severity analysis."""
    _configure_logging(verbose)


@main.command()
@click.argument("message")
@click.argument("base_branch", required=False)
@click.option("--draft/--no-draft", "-d", default=None, help="Create as draft PR.")
@click.option("--title", "-t", default=None, help="PR title (defaults to the commit message).")
@click.option("--body", "-b", default=None, help="PR description (overrides the generated one).")
@click.option("--copilot/--no-copilot", default=None, help="Generate the PR description.")
@click.option("--fill", "-f", is_flag=True, help="Let gh fill the body from commits.")
@click.option("--path", "-p", default=None, help="Path to the repository.")
def pr(
    message: str, base_branch: str | None, draft: bool | None, title: str | None,
    body: str | None, copilot: bool | None, fill: bool, path: str | None,
):
    """Commit tracked changes, push the branch and open a PR.

    Examples:

        qpr pr "feat: add pagination"

        qpr pr "fix: login redirect" develop --draft
    """
    from quickpr.github.git import commit_all, get_default_branch, push_branch
    from quickpr.github.pr import PROptions, create_pr

    root = _get_project_root(path)
    config = _load_config(root)
    current = _require_branch(root)

    console.info("Committing changes...")
    try:
        commit_all(message, cwd=root)
    except GitError:
        console.warning("No changes to commit or commit failed. Continuing...")

    console.info(f"Current branch: {current}")

    base = base_branch or config.pr.base or get_default_branch(cwd=root, remote=config.git.remote)
    if not base:
        console.error("Could not find main or master branch")
        sys.exit(1)
    if current == base:
        console.error(f"Cannot create PR from {base} to itself")
        sys.exit(1)
    console.info(f"Target branch: {base}")

    console.info(f"Pushing {current} to remote...")
    try:
        push_branch(current, cwd=root, remote=config.git.remote)
    except GitError:
        console.error("Failed to push branch")
        console.tips("Make sure you have committed your changes before pushing.", [])
        sys.exit(1)

    options = PROptions(
        title=title or message,
        body=body,
        draft=config.pr.draft if draft is None else draft,
        copilot=False if fill else (config.pr.copilot if copilot is None else copilot),
    )
    try:
        create_pr(base, current, options, console, config=config, cwd=root)
    except GitHubCLIError:
        console.error("Failed to create PR")
        console.tips("Make sure GitHub CLI is installed:", GH_TIPS)
        console.tips("For AI summaries, install GitHub Copilot CLI:", COPILOT_TIPS)
        sys.exit(1)


@main.command()
@click.argument("message")
@click.option("--path", "-p", default=None, help="Path to the repository.")
def push(message: str, path: str | None):
    """Stage everything, commit with MESSAGE and push the current branch."""
    from quickpr.github.git import commit_and_push

    root = _get_project_root(path)
    config = _load_config(root)
    branch = _require_branch(root)

    console.info(f'Committing all files: "{message}"')
    try:
        commit_and_push(message, branch, cwd=root, remote=config.git.remote)
    except GitError as e:
        console.error(f"Failed to commit and push ({e})")
        console.tips("Tips:", [
            "Make sure you have changes to commit",
            "Check if remote branch exists",
            "Verify you have push permissions",
        ])
        sys.exit(1)
    console.success(f"Committed and pushed to {branch}")


@main.command()
@click.option("--yes", "-y", is_flag=True, help="Skip the confirmation prompt.")
@click.option("--path", "-p", default=None, help="Path to the repository.")
def amend(yes: bool, path: str | None):
    """Fold all changes into the last commit and force-push."""
    from quickpr.github.git import force_commit_and_push

    root = _get_project_root(path)
    config = _load_config(root)
    branch = _require_branch(root)

    if not yes and not console.confirm(f"Amend the last commit and force-push {branch}?"):
        console.warning("Aborted")
        return

    try:
        force_commit_and_push(branch, cwd=root, remote=config.git.remote)
    except GitError as e:
        console.error(f"Failed to amend and force push ({e})")
        console.tips("Tips:", [
            "Make sure you have a previous commit to amend",
            "Check if you have force push permissions",
            "Verify remote branch exists",
        ])
        sys.exit(1)
    console.success(f"Amended and force pushed {branch}")
    console.warning("Remote history has been rewritten")


@main.command()
@click.option("--base", "-b", default=None, help="Base ref (defaults to the default branch).")
@click.option("--head", default="HEAD", help="Head ref to analyze.")
@click.option(
    "--format", "output_format",
    type=click.Choice(["markdown", "json", "table"]),
    default="markdown",
    help="Output format.",
)
@click.option("--path", "-p", default=None, help="Path to the repository.")
def analyze(base: str | None, head: str, output_format: str, path: str | None):
    """Classify the changes between two refs without opening a PR.

    Markdown output is the PR description itself and goes to stdout, so it
    can be redirected; when $GITHUB_STEP_SUMMARY is set it is appended there
    too.

    Usage in CI:

        qpr analyze --base origin/main --head HEAD > analysis.md
    """
    from quickpr.github.git import get_default_branch
    from quickpr.github.pr import analyze_range, step_summary_sink

    err = Console(stderr=True)
    root = _get_project_root(path)
    config = _load_config(root)

    base = base or config.pr.base or get_default_branch(cwd=root, remote=config.git.remote)
    if not base:
        err.error("Could not find main or master branch; pass --base")
        sys.exit(1)

    with err.status(f"Analyzing {base}...{head}"):
        analysis = analyze_range(base, head, config=config, cwd=root)

    if analysis is None:
        err.warning("No changes detected")
        return

    if output_format == "json":
        data = {"base": base, "head": head, **analysis.result.to_dict()}
        click.echo(json.dumps(data, indent=2, ensure_ascii=False))
    elif output_format == "table":
        console.show_classification(analysis.result)
    else:
        with step_summary_sink(config.step_summary) as sink:
            description = analysis.render(sink=sink, max_files=config.pr.max_files_listed)
        click.echo(description)


@main.command()
@click.option("--path", "-p", default=None, help="Path to the repository.")
def workflow(path: str | None):
    """Write a GitHub Actions workflow that adds the analysis to every PR."""
    from quickpr.github.workflow import write_workflow

    root = _get_project_root(path)
    try:
        workflow_path, backup_path = write_workflow(root)
    except WorkflowError as e:
        console.error(str(e))
        sys.exit(1)

    if backup_path is not None:
        console.warning(f"Workflow file already existed, backup created: {backup_path}")
    console.success(f"Created workflow: {workflow_path}")


# =========================================================================
# Config Management
# =========================================================================

@main.command("config")
@click.argument("action", type=click.Choice(["set", "get", "show"]))
@click.argument("key", required=False)
@click.argument("value", required=False)
@click.option("--path", "-p", default=None, help="Path to the repository.")
def config_cmd(action: str, key: str | None, value: str | None, path: str | None):
    """Manage quickpr configuration."""
    root = _get_project_root(path)
    config = _load_config(root)

    if action == "show":
        console.console.print_json(json.dumps(config.model_dump(), indent=2))
    elif action == "get":
        if not key:
            console.error("Usage: qpr config get <key>")
            sys.exit(1)
        data = config.model_dump()
        for part in key.split("."):
            if isinstance(data, dict) and part in data:
                data = data[part]
            else:
                console.error(f"Unknown key: {key}")
                sys.exit(1)
        console.console.print(f"{key} = {data}")
    elif action == "set":
        if not key or value is None:
            console.error("Usage: qpr config set <key> <value>")
            sys.exit(1)
        try:
            # Try to parse as JSON for non-string values
            try:
                parsed_value = json.loads(value)
            except json.JSONDecodeError:
                parsed_value = value

            config = set_config_value(config, key, parsed_value)
            save_config(root, config)
            console.success(f"Set {key} = {parsed_value}")
        except KeyError:
            console.error(f"Unknown config key: {key}")
            sys.exit(1)
        except ConfigError as e:
            console.error(str(e))
            sys.exit(1)


if __name__ == "__main__":
    main()
