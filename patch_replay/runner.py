from __future__ import annotations

import logging
from pathlib import Path

from .config import Config
from .errors import PreconditionError
from .models import OutcomeKind, RestoreResult, RunContext, RunOutcome, RunReport
from .operator_io import ConsoleOperator, OperatorIO
from .patches import (
    apply_patches,
    capture_original_branch,
    check_preconditions,
    create_temp_branch,
    discover_patches,
)
from .replay import CommandPolicy, replay_commits
from .restore import discard_temp_branch, restore
from .util import log_timing, utc_timestamp, write_run_record
from .vcs.gateway import GitGateway, VCSGateway

logger = logging.getLogger(__name__)


def run_patch_replay(
    config: Config,
    gateway: VCSGateway | None = None,
    operator: OperatorIO | None = None,
) -> RunReport:
    repo_root = Path(config.repo_root).resolve()
    gateway = gateway or GitGateway(repo_root)
    operator = operator or ConsoleOperator()
    report = RunReport(outcome=RunOutcome.success(), started_at=utc_timestamp())
    ctx: RunContext | None = None

    try:
        ctx = RunContext(
            repo_root=repo_root,
            original_branch=capture_original_branch(gateway, config.target_branch),
            target_branch=config.target_branch,
            temp_branch=config.temp_branch,
        )
        report.outcome = _run_stages(ctx, gateway, operator, config, report)
    except PreconditionError as exc:
        report.outcome = RunOutcome.failed(str(exc))
    except (Exception, KeyboardInterrupt) as exc:
        logger.exception("Run failed")
        report.outcome = RunOutcome.failed(f"{type(exc).__name__}: {exc}")

    if ctx is not None and ctx.temp_branch_created:
        if report.outcome.is_success:
            report.restore = _guarded(discard_temp_branch, ctx, gateway)
        else:
            report.restore = _guarded(restore, ctx, gateway)

    _announce(ctx, operator, report)
    report.finished_at = utc_timestamp()
    if config.record_dir is not None:
        report.record_path = write_run_record(
            run_record_payload(config, report), config.record_dir, timestamp=report.started_at
        )
    return report


def _run_stages(
    ctx: RunContext,
    gateway: VCSGateway,
    operator: OperatorIO,
    config: Config,
    report: RunReport,
) -> RunOutcome:
    check_preconditions(ctx, gateway)
    patches = discover_patches(config.resolved_patch_dir(), config.patch_suffix)
    operator.say(f"Found {len(patches)} patch file(s) in {config.resolved_patch_dir()}")

    create_temp_branch(ctx, gateway)
    with log_timing(logger, "apply", report.timings):
        applied = apply_patches(ctx, gateway, operator, patches, config)
    report.applied = applied.applied
    report.skipped = applied.skipped
    if not applied.outcome.is_success:
        return applied.outcome

    with log_timing(logger, "replay", report.timings):
        replayed = replay_commits(ctx, gateway, operator, CommandPolicy(config.allowed_commands))
    report.replayed = replayed.replayed
    return replayed.outcome


def _guarded(step, ctx: RunContext, gateway: VCSGateway) -> RestoreResult:
    try:
        return step(ctx, gateway)
    except (Exception, KeyboardInterrupt) as exc:
        logger.exception("Cleanup raised")
        return RestoreResult(ok=False, problems=[f"{type(exc).__name__}: {exc}"])


def _announce(ctx: RunContext | None, operator: OperatorIO, report: RunReport) -> None:
    outcome = report.outcome
    if outcome.kind is OutcomeKind.SUCCESS:
        operator.say(
            f"Done: {len(report.replayed)} commit(s) replayed, {len(report.skipped)} patch(es) skipped.",
            style="bold green",
        )
    elif outcome.kind is OutcomeKind.ABORTED_BY_OPERATOR:
        operator.say(f"Stopped: {outcome.reason}", style="yellow")
    else:
        operator.say(f"Error: {outcome.reason}", style="bold red")

    if ctx is None or report.restore is None:
        return
    if report.restore.ok:
        if not outcome.is_success:
            operator.say(
                f"Cleanup complete: back on {ctx.original_branch}, {ctx.temp_branch} removed.",
                style="green",
            )
        return
    operator.say("Warning: cleanup did not finish.", style="bold red")
    for problem in report.restore.problems:
        operator.show(f"  {problem}")
    operator.say("Finish it by hand with:")
    operator.show(f"  git checkout {ctx.original_branch}\n  git branch -D {ctx.temp_branch}")


def run_record_payload(config: Config, report: RunReport) -> dict:
    payload = {
        "command": "run",
        "config": {
            "repo_root": str(config.repo_root),
            "target_branch": config.target_branch,
            "temp_branch": config.temp_branch,
            "patch_dir": str(config.resolved_patch_dir()),
            "patch_suffix": config.patch_suffix,
            "three_way": config.three_way,
        },
        "outcome": {
            "kind": report.outcome.kind.value,
            "reason": report.outcome.reason,
            "exit_code": report.outcome.exit_code,
        },
        "applied": report.applied,
        "skipped": report.skipped,
        "replayed": report.replayed,
        "restore": (
            None
            if report.restore is None
            else {"ok": report.restore.ok, "problems": report.restore.problems}
        ),
        "timings": report.timings,
        "started_at": report.started_at,
        "finished_at": report.finished_at,
    }
    return payload
