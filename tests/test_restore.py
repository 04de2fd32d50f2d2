from __future__ import annotations

from pathlib import Path

from conftest import FakeGateway
from patch_replay.models import RunContext
from patch_replay.restore import discard_temp_branch, restore

TEMP_REF = ["rev-parse", "--verify", "--quiet", "refs/heads/patch-replay/staging"]


def _ctx(tmp_path: Path) -> RunContext:
    return RunContext(
        repo_root=tmp_path,
        original_branch="main",
        target_branch="main",
        temp_branch="patch-replay/staging",
        temp_branch_created=True,
    )


def _mutations(gateway: FakeGateway) -> list[list[str]]:
    return [call for call in gateway.calls if call[0] != "rev-parse"]


def test_restore_checks_out_original_and_deletes_temp(tmp_path: Path, gateway: FakeGateway) -> None:
    gateway.on(TEMP_REF, stdout="abc\n")
    ctx = _ctx(tmp_path)

    result = restore(ctx, gateway)

    assert result.ok
    assert _mutations(gateway) == [
        ["checkout", "main"],
        ["branch", "-D", "patch-replay/staging"],
    ]
    assert not ctx.temp_branch_created


def test_restore_aborts_interrupted_am_first(tmp_path: Path, gateway: FakeGateway) -> None:
    (tmp_path / ".git" / "rebase-apply").mkdir(parents=True)
    gateway.on(TEMP_REF, stdout="abc\n")

    restore(_ctx(tmp_path), gateway)

    assert _mutations(gateway)[0] == ["am", "--abort"]


def test_restore_aborts_interrupted_cherry_pick(tmp_path: Path, gateway: FakeGateway) -> None:
    gateway.on(["rev-parse", "--verify", "--quiet", "CHERRY_PICK_HEAD"], stdout="abc\n")
    gateway.on(TEMP_REF, stdout="abc\n")

    restore(_ctx(tmp_path), gateway)

    assert _mutations(gateway)[0] == ["cherry-pick", "--abort"]


def test_restore_collects_failures_and_keeps_going(tmp_path: Path, gateway: FakeGateway) -> None:
    gateway.on(TEMP_REF, stdout="abc\n")
    gateway.on(["checkout"], returncode=1, stderr="error: you need to resolve your current index first")
    gateway.on(["branch", "-D"], returncode=1, stderr="error: cannot delete branch")
    ctx = _ctx(tmp_path)

    result = restore(ctx, gateway)

    assert not result.ok
    assert len(result.problems) == 2
    assert "resolve your current index" in result.problems[0]
    assert ctx.temp_branch_created


def test_restore_without_temp_branch_only_checks_out(tmp_path: Path, gateway: FakeGateway) -> None:
    result = restore(_ctx(tmp_path), gateway)

    assert result.ok
    assert _mutations(gateway) == [["checkout", "main"]]


def test_discard_temp_branch_reports_failure(tmp_path: Path, gateway: FakeGateway) -> None:
    gateway.on(["branch", "-D"], returncode=1, stderr="error: branch not found")

    result = discard_temp_branch(_ctx(tmp_path), gateway)

    assert not result.ok
    assert "branch not found" in result.problems[0]


def test_unreadable_state_is_recorded_and_checkout_still_runs(
    tmp_path: Path, gateway: FakeGateway
) -> None:
    gateway.raise_on(["rev-parse", "--git-path"], OSError("git executable vanished"))
    gateway.on(TEMP_REF, stdout="abc\n")
    ctx = _ctx(tmp_path)

    result = restore(ctx, gateway)

    assert not result.ok
    assert result.problems == ["am state: git executable vanished"]
    assert _mutations(gateway) == [
        ["checkout", "main"],
        ["branch", "-D", "patch-replay/staging"],
    ]
    assert not ctx.temp_branch_created
