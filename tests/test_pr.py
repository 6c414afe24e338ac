"""Tests for PR creation and description generation."""

from __future__ import annotations

import shutil
import subprocess
from pathlib import Path

import pytest

from quickpr.config import ProjectConfig
from quickpr.exceptions import GitHubCLIError
from quickpr.github.git import get_diff
from quickpr.github.pr import (
    PROptions,
    analyze_range,
    create_pr,
    generate_pr_description,
    generate_summary,
    step_summary_sink,
)


class TestAnalyzeRange:
    def test_classifies_range(self, branch_repo):
        analysis = analyze_range("main", "feature/cart")
        assert analysis is not None
        assert analysis.result.severity.value == "Low"
        assert analysis.result.metrics.files_changed == 1
        assert analysis.commits == "fix: show thousands separator"

    def test_empty_diff(self, fake_run):
        fake_run.respond("git", "diff", stdout="")
        assert analyze_range("main", "feature") is None
        # Nothing else is queried once the diff is known to be empty
        assert fake_run.find("git", "log") is None

    def test_security_range_is_critical(self, fake_run):
        fake_run.respond("git", "diff", stdout="diff --git a/auth.js b/auth.js\n+const token = authenticateUser();")
        fake_run.respond("git", "log", stdout="security: fix authentication vulnerability")
        fake_run.respond(
            "git", "diff", "--stat",
            stdout=" auth.js | 100 ++++\n 1 file changed, 100 insertions(+)",
        )
        analysis = analyze_range("main", "feature/security")
        assert "## Severity: Critical" in analysis.render()
        assert "Critical keywords in commits" in analysis.render()

    @pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")
    def test_latin1_file_in_real_repo(self, tmp_path: Path):
        def git(*args: str) -> None:
            subprocess.run(
                ["git", "-c", "user.name=t", "-c", "user.email=t@example.com", *args],
                cwd=tmp_path, check=True, capture_output=True,
            )

        git("init", "-q")
        git("symbolic-ref", "HEAD", "refs/heads/main")
        (tmp_path / "README").write_text("readme\n")
        git("add", "-A")
        git("commit", "-q", "-m", "init")
        git("checkout", "-q", "-b", "feature")
        (tmp_path / "a.txt").write_bytes(b"caf\xe9\n")
        git("add", "-A")
        git("commit", "-q", "-m", "add latin-1 note")

        analysis = analyze_range("main", "feature", cwd=tmp_path)
        assert analysis is not None
        assert analysis.result.metrics.insertions == 1
        assert analysis.commits == "add latin-1 note"
        assert "caf\ufffd" in get_diff("main", "feature", cwd=tmp_path)


class TestGeneratePRDescription:
    def test_description_sections(self, branch_repo, quiet_console):
        description = generate_pr_description("main", "feature/cart", quiet_console)
        assert description is not None
        for header in ("## Summary", "## Severity:", "## Changes Made", "## Impact Analysis",
                       "## Risks & Considerations"):
            assert header in description
        assert "- fix: show thousands separator" in description

    def test_prints_description(self, branch_repo, quiet_console):
        description = generate_pr_description("main", "feature/cart", quiet_console)
        output = quiet_console.console.file.getvalue()
        assert "## Severity: Low" in output
        assert description.splitlines()[0] in output

    def test_no_changes(self, fake_run, quiet_console):
        fake_run.respond("git", "diff", stdout="")
        assert generate_pr_description("main", "feature/empty", quiet_console) is None
        assert "No changes detected" in quiet_console.console.file.getvalue()

    def test_works_without_copilot(self, branch_repo, quiet_console):
        branch_repo.fail("gh", "copilot")
        description = generate_pr_description("main", "feature/cart", quiet_console)
        assert description is not None
        assert "Copilot CLI not available" in quiet_console.console.file.getvalue()

    def test_writes_to_sink(self, branch_repo, quiet_console, tmp_path: Path):
        summary = tmp_path / "summary.md"
        with summary.open("a", encoding="utf-8") as sink:
            description = generate_pr_description("main", "feature/cart", quiet_console, sink=sink)
        assert summary.read_text(encoding="utf-8") == f"\n# PR Analysis\n\n{description}\n"

    def test_file_limit_from_config(self, fake_run, quiet_console):
        stat = "\n".join(f" f{i}.py | 1 +" for i in range(6)) + "\n 6 files changed, 6 insertions(+)"
        fake_run.respond("git", "diff", stdout="+x")
        fake_run.respond("git", "diff", "--stat", stdout=stat)
        config = ProjectConfig()
        config.pr.max_files_listed = 3
        description = generate_pr_description("main", "f", quiet_console, config=config)
        assert "- f2.py" in description
        assert "- f3.py" not in description


class TestGenerateSummary:
    def test_commits_and_stats(self, fake_run):
        fake_run.respond("git", "log", stdout="- feat: new thing\n- fix: bug")
        fake_run.respond("git", "diff", "--stat", stdout=" file.js | 10 ++\n 1 file changed")
        summary = generate_summary("main", "feature")
        assert summary == (
            "## Changes\n\n- feat: new thing\n- fix: bug\n\n"
            "## File Stats\n\nfile.js | 10 ++\n 1 file changed"
        )

    def test_uses_bulleted_log(self, fake_run):
        generate_summary("main", "feature")
        assert fake_run.find("git", "log")[2] == "--pretty=format:- %s"

    def test_stats_only(self, fake_run):
        fake_run.respond("git", "diff", "--stat", stdout=" a | 1 +")
        assert generate_summary("main", "feature") == "## File Stats\n\na | 1 +"

    def test_nothing(self, fake_run):
        assert generate_summary("main", "feature") is None


class TestStepSummarySink:
    def test_no_env(self):
        with step_summary_sink() as sink:
            assert sink is None

    def test_disabled(self, monkeypatch, tmp_path: Path):
        monkeypatch.setenv("GITHUB_STEP_SUMMARY", str(tmp_path / "s.md"))
        with step_summary_sink(enabled=False) as sink:
            assert sink is None

    def test_appends(self, monkeypatch, tmp_path: Path):
        path = tmp_path / "s.md"
        path.write_text("before\n")
        monkeypatch.setenv("GITHUB_STEP_SUMMARY", str(path))
        with step_summary_sink() as sink:
            sink.write("after\n")
        assert path.read_text() == "before\nafter\n"

    def test_unwritable(self, monkeypatch, tmp_path: Path):
        monkeypatch.setenv("GITHUB_STEP_SUMMARY", str(tmp_path / "missing" / "s.md"))
        with step_summary_sink() as sink:
            assert sink is None


class TestCreatePR:
    def test_explicit_title_and_body(self, fake_run, quiet_console):
        options = PROptions(title="Test PR", body="This is a test PR")
        create_pr("main", "feature/test", options, quiet_console)

        cmd = fake_run.find("gh", "pr", "create")
        assert cmd[:7] == ["gh", "pr", "create", "--base", "main", "--head", "feature/test"]
        assert cmd[cmd.index("--title") + 1] == "Test PR"
        assert cmd[cmd.index("--body") + 1] == "This is a test PR"
        # An explicit body skips analysis entirely
        assert fake_run.find("git", "diff") is None

    def test_draft(self, fake_run, quiet_console):
        create_pr("main", "feature/test", PROptions(title="T", body="B", draft=True), quiet_console)
        assert "--draft" in fake_run.find("gh", "pr", "create")

    def test_generated_description_via_body_file(self, branch_repo, quiet_console):
        create_pr("main", "feature/cart", PROptions(title="Cart"), quiet_console)

        cmd = branch_repo.find("gh", "pr", "create")
        assert "--body-file" in cmd
        assert "--body" not in cmd
        assert "## Severity: Low" in branch_repo.body_files[0]
        # Temp file is cleaned up after gh returns
        assert not Path(cmd[cmd.index("--body-file") + 1]).exists()

    def test_falls_back_to_summary(self, fake_run, quiet_console):
        fake_run.respond("git", "diff", stdout="")
        fake_run.respond("git", "log", stdout="- feat: new thing")
        create_pr("main", "feature", PROptions(title="T"), quiet_console)

        assert "--body-file" in fake_run.find("gh", "pr", "create")
        assert fake_run.body_files[0].startswith("## Changes\n\n- feat: new thing")

    def test_fill_when_nothing_to_describe(self, fake_run, quiet_console):
        create_pr("main", "feature", PROptions(title="T"), quiet_console)
        assert fake_run.find("gh", "pr", "create")[-1] == "--fill"

    def test_fill_when_copilot_disabled(self, branch_repo, quiet_console):
        create_pr("main", "feature/cart", PROptions(title="T", copilot=False), quiet_console)
        assert branch_repo.find("gh", "pr", "create")[-1] == "--fill"
        assert branch_repo.find("git", "diff") is None

    def test_step_summary_written(self, branch_repo, quiet_console, monkeypatch, tmp_path: Path):
        summary = tmp_path / "summary.md"
        monkeypatch.setenv("GITHUB_STEP_SUMMARY", str(summary))
        create_pr("main", "feature/cart", PROptions(title="T"), quiet_console)
        assert "# PR Analysis" in summary.read_text(encoding="utf-8")

    def test_step_summary_disabled_by_config(
        self, branch_repo, quiet_console, monkeypatch, tmp_path: Path
    ):
        summary = tmp_path / "summary.md"
        monkeypatch.setenv("GITHUB_STEP_SUMMARY", str(summary))
        config = ProjectConfig(step_summary=False)
        create_pr("main", "feature/cart", PROptions(title="T"), quiet_console, config=config)
        assert not summary.exists()

    def test_gh_failure_raises_and_cleans_up(self, branch_repo, quiet_console):
        branch_repo.fail("gh", "pr", "create")
        with pytest.raises(GitHubCLIError):
            create_pr("main", "feature/cart", PROptions(title="T"), quiet_console)
        cmd = branch_repo.find("gh", "pr", "create")
        assert not Path(cmd[cmd.index("--body-file") + 1]).exists()
