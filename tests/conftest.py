"""Shared test fixtures for quickpr."""

from __future__ import annotations

import io
import subprocess
from pathlib import Path

import pytest
from rich.console import Console as RichConsole

from quickpr.ui.console import Console


SAMPLE_DIFF = """\
diff --git a/src/cart.py b/src/cart.py
index abc1234..def5678 100644
--- a/src/cart.py
+++ b/src/cart.py
@@ -5,7 +5,7 @@ TAX_RATE = 0.08
 def format_price(value):
-    return f"${value:.2f}"
+    return f"${value:,.2f}"
"""

SAMPLE_STAT = """\
 src/cart.py | 2 +-
 1 file changed, 1 insertion(+), 1 deletion(-)"""


class FakeRun:
    """Stand-in for subprocess.run that records commands and replays canned output.

    Responses are keyed by command prefix; the longest matching prefix wins.
    Unmatched commands succeed with empty output.
    """

    def __init__(self) -> None:
        self.calls: list[list[str]] = []
        self.kwargs: list[dict] = []
        self.body_files: list[str] = []
        self._responses: dict[tuple[str, ...], tuple[int, str]] = {}
        self._raises: dict[tuple[str, ...], BaseException] = {}

    def respond(self, *prefix: str, stdout: str = "", returncode: int = 0) -> None:
        self._responses[prefix] = (returncode, stdout)

    def fail(self, *prefix: str, returncode: int = 1) -> None:
        self._responses[prefix] = (returncode, "")

    def raise_on(self, *prefix: str, exc: BaseException) -> None:
        self._raises[prefix] = exc

    def __call__(self, cmd, **kwargs):
        cmd = list(cmd)
        self.calls.append(cmd)
        self.kwargs.append(kwargs)

        if "--body-file" in cmd:
            self.body_files.append(
                Path(cmd[cmd.index("--body-file") + 1]).read_text(encoding="utf-8")
            )

        for prefix, exc in self._raises.items():
            if tuple(cmd[:len(prefix)]) == prefix:
                raise exc

        for prefix in sorted(self._responses, key=len, reverse=True):
            if tuple(cmd[:len(prefix)]) == prefix:
                returncode, stdout = self._responses[prefix]
                return subprocess.CompletedProcess(cmd, returncode, stdout=stdout, stderr="")
        return subprocess.CompletedProcess(cmd, 0, stdout="", stderr="")

    def commands(self) -> list[str]:
        return [" ".join(c) for c in self.calls]

    def find(self, *prefix: str) -> list[str] | None:
        for cmd in self.calls:
            if tuple(cmd[:len(prefix)]) == prefix:
                return cmd
        return None


@pytest.fixture(autouse=True)
def _no_step_summary(monkeypatch: pytest.MonkeyPatch) -> None:
    """Tests must not append to a real Actions step summary."""
    monkeypatch.delenv("GITHUB_STEP_SUMMARY", raising=False)


@pytest.fixture
def fake_run(monkeypatch: pytest.MonkeyPatch) -> FakeRun:
    fake = FakeRun()
    monkeypatch.setattr(subprocess, "run", fake)
    return fake


@pytest.fixture
def branch_repo(fake_run: FakeRun) -> FakeRun:
    """A fake repository on `feature/cart` with one classifiable change against main."""
    fake_run.respond("git", "branch", "--show-current", stdout="feature/cart\n")
    fake_run.respond("git", "symbolic-ref", stdout="refs/remotes/origin/main\n")
    fake_run.respond("git", "diff", stdout=SAMPLE_DIFF)
    fake_run.respond("git", "diff", "--stat", stdout=SAMPLE_STAT)
    fake_run.respond("git", "log", stdout="fix: show thousands separator")
    fake_run.respond("gh", "copilot", stdout="usage")
    return fake_run


@pytest.fixture
def quiet_console() -> Console:
    """A Console whose output is captured in memory."""
    return Console(RichConsole(file=io.StringIO(), width=120))
