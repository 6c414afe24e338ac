"""GitHub Actions workflow that adds the change analysis to every PR."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from quickpr.exceptions import WorkflowError

logger = logging.getLogger("quickpr.workflow")

WORKFLOW_DIR = Path(".github") / "workflows"
WORKFLOW_FILE = "pr-summary.yml"
ANALYSIS_START = "<!-- AI_ANALYSIS_START -->"
ANALYSIS_END = "<!-- AI_ANALYSIS_END -->"

WORKFLOW_TEMPLATE = """\
name: PR Summary with AI Analysis

on:
  pull_request:
    types: [opened, synchronize, reopened]

permissions:
  contents: read
  pull-requests: write

jobs:
  update-pr-summary:
    runs-on: ubuntu-latest
    steps:
      - name: Checkout code
        uses: actions/checkout@v4
        with:
          fetch-depth: 0
          ref: ${{ github.event.pull_request.head.sha }}

      - name: Setup Python
        uses: actions/setup-python@v5
        with:
          python-version: '3.12'

      - name: Install semantic-create-pr
        run: pip install semantic-create-pr

      - name: Generate PR Analysis
        id: analysis
        run: |
          BASE_BRANCH=${{ github.event.pull_request.base.ref }}
          echo "Analyzing PR #${{ github.event.pull_request.number }}: HEAD -> $BASE_BRANCH"

          if qpr analyze --base "origin/$BASE_BRANCH" --head HEAD > /tmp/pr-analysis.md \\
              && grep -q "## Severity: " /tmp/pr-analysis.md; then
            echo "ANALYSIS_GENERATED=true" >> "$GITHUB_OUTPUT"
          fi

      - name: Update PR Description
        if: steps.analysis.outputs.ANALYSIS_GENERATED == 'true'
        env:
          GITHUB_TOKEN: ${{ secrets.GITHUB_TOKEN }}
        run: |
          PR_NUMBER=${{ github.event.pull_request.number }}

          EXISTING_BODY=$(gh pr view $PR_NUMBER --json body -q .body)

          # Drop the analysis block left by a previous run
          NEW_BODY=$(echo "$EXISTING_BODY" | sed '/@ANALYSIS_START@/,/@ANALYSIS_END@/d')

          {
            echo "$NEW_BODY"
            echo ""
            echo "---"
            echo ""
            echo "@ANALYSIS_START@"
            cat /tmp/pr-analysis.md
            echo "@ANALYSIS_END@"
          } > /tmp/pr-body.md

          gh pr edit $PR_NUMBER --body-file /tmp/pr-body.md
          echo "PR description updated with AI analysis"

      - name: Comment on PR
        if: steps.analysis.outputs.ANALYSIS_GENERATED == 'true'
        env:
          GITHUB_TOKEN: ${{ secrets.GITHUB_TOKEN }}
        run: |
          PR_NUMBER=${{ github.event.pull_request.number }}

          gh pr comment $PR_NUMBER --body "🤖 **AI Analysis Complete**

          The PR description has been updated with comprehensive analysis including:
          - 📊 Severity level and reasoning
          - 📈 Change metrics
          - 🎯 Impact analysis
          - ⚠️ Risk considerations

          Check the updated PR description for full details!"
"""


def render_workflow() -> str:
    """The workflow YAML with the analysis markers filled in."""
    return (
        WORKFLOW_TEMPLATE
        .replace("@ANALYSIS_START@", ANALYSIS_START)
        .replace("@ANALYSIS_END@", ANALYSIS_END)
    )


def write_workflow(root: Path) -> tuple[Path, Path | None]:
    """Write the PR summary workflow under `root`.

    An existing workflow file is copied to ``pr-summary.yml.backup`` first.
    Returns ``(workflow_path, backup_path_or_None)``.
    """
    workflow_dir = root / WORKFLOW_DIR
    workflow_path = workflow_dir / WORKFLOW_FILE
    backup_path = None

    try:
        workflow_dir.mkdir(parents=True, exist_ok=True)
        if workflow_path.exists():
            backup_path = workflow_path.with_name(f"{WORKFLOW_FILE}.backup")
            shutil.copyfile(workflow_path, backup_path)
            logger.info("Backed up existing workflow to %s", backup_path)
        workflow_path.write_text(render_workflow(), encoding="utf-8")
    except OSError as e:
        raise WorkflowError(f"Failed to create workflow file: {e}") from e

    return workflow_path, backup_path
