from __future__ import annotations

import shutil
import subprocess
from pathlib import Path
import sys
from typing import Sequence

sys.path.append(str(Path(__file__).resolve().parents[1]))

import pytest

from patch_replay.operator_io import OperatorIO
from patch_replay.vcs.gateway import CommandResult, VCSGateway


class FakeGateway(VCSGateway):
    """Answers git commands from registered rules and records every call.

    Rules match on an argument prefix; the most recently registered matching
    rule wins. A rule with several results hands them out in order and then
    keeps repeating the last one.
    """

    def __init__(self, branch: str = "main") -> None:
        self.calls: list[list[str]] = []
        self._rules: list[tuple[list[str], list[CommandResult]]] = []
        self._raises: list[tuple[list[str], BaseException]] = []
        self.on(["rev-parse", "--is-inside-work-tree"], stdout="true\n")
        self.on(["rev-parse", "--git-path", "rebase-apply"], stdout=".git/rebase-apply\n")
        self.on(["rev-parse", "--verify", "--quiet"], returncode=1)
        self.on(["rev-parse", "--abbrev-ref", "HEAD"], stdout=f"{branch}\n")

    def on(self, prefix: Sequence[str], returncode: int = 0, stdout: str = "", stderr: str = "") -> None:
        self.sequence(prefix, [(returncode, stdout, stderr)])

    def sequence(self, prefix: Sequence[str], results: list[tuple[int, str, str]]) -> None:
        rendered = [CommandResult(list(prefix), code, out, err) for code, out, err in results]
        self._rules.append((list(prefix), rendered))

    def raise_on(self, prefix: Sequence[str], exc: BaseException) -> None:
        self._raises.append((list(prefix), exc))

    def execute(self, args: Sequence[str]) -> CommandResult:
        args = list(args)
        self.calls.append(args)
        for prefix, exc in reversed(self._raises):
            if args[: len(prefix)] == prefix:
                raise exc
        for prefix, results in reversed(self._rules):
            if args[: len(prefix)] == prefix:
                template = results.pop(0) if len(results) > 1 else results[0]
                return CommandResult(args, template.returncode, template.stdout, template.stderr)
        return CommandResult(args, 0, "", "")

    def called(self, prefix: Sequence[str]) -> list[list[str]]:
        prefix = list(prefix)
        return [call for call in self.calls if call[: len(prefix)] == prefix]


class ScriptedOperator(OperatorIO):
    def __init__(self, answers: Sequence[str] = ()) -> None:
        self.answers = list(answers)
        self.prompts: list[str] = []
        self.lines: list[str] = []

    def ask(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if not self.answers:
            raise EOFError(f"no scripted answer for prompt {prompt!r}")
        return self.answers.pop(0)

    def say(self, message: str, style: str | None = None) -> None:
        self.lines.append(message)

    @property
    def transcript(self) -> str:
        return "\n".join(self.lines)


@pytest.fixture(autouse=True)
def _wide_terminal(monkeypatch: pytest.MonkeyPatch) -> None:
    # Rich sizes --help output from the terminal width; keep long option names untruncated.
    monkeypatch.setenv("COLUMNS", "200")


@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway()


def git(repo: Path, *args: str) -> str:
    result = subprocess.run(
        ["git", *args],
        cwd=repo,
        capture_output=True,
        text=True,
        check=True,
    )
    return result.stdout.strip()


def commit_file(repo: Path, name: str, content: str, message: str) -> None:
    (repo / name).write_text(content, encoding="utf-8")
    git(repo, "add", name)
    git(repo, "commit", "-q", "-m", message)


@pytest.fixture
def git_repo(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    if shutil.which("git") is None:
        pytest.skip("git is not installed")
    global_config = tmp_path / "gitconfig"
    global_config.write_text("", encoding="utf-8")
    monkeypatch.setenv("GIT_CONFIG_GLOBAL", str(global_config))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    for prefix in ("GIT_AUTHOR", "GIT_COMMITTER"):
        monkeypatch.setenv(f"{prefix}_NAME", "Patch Tester")
        monkeypatch.setenv(f"{prefix}_EMAIL", "tester@example.com")
    repo = tmp_path / "repo"
    repo.mkdir()
    git(repo, "init", "-q")
    git(repo, "symbolic-ref", "HEAD", "refs/heads/main")
    commit_file(repo, "base.txt", "one\ntwo\nthree\n", "Initial commit")
    return repo


def make_patches(repo: Path, out_dir: Path, changes: list[tuple[str, str, str]]) -> list[Path]:
    """Commit ``changes`` on a scratch branch, export them with format-patch, drop the branch."""
    git(repo, "checkout", "-q", "-b", "scratch")
    for name, content, message in changes:
        commit_file(repo, name, content, message)
    out_dir.mkdir(parents=True, exist_ok=True)
    git(repo, "format-patch", "-q", "main", "-o", str(out_dir))
    git(repo, "checkout", "-q", "main")
    git(repo, "branch", "-q", "-D", "scratch")
    return sorted(out_dir.glob("*.patch"))
