from __future__ import annotations

import logging

from .models import RestoreResult, RunContext
from .vcs.gateway import CommandResult, VCSGateway
from .vcs.queries import am_in_progress, branch_exists, cherry_pick_in_progress

logger = logging.getLogger(__name__)


def restore(ctx: RunContext, gateway: VCSGateway) -> RestoreResult:
    """Put the repository back on the original branch and drop the temporary one.

    Every step runs even when an earlier one fails; failures are collected so
    the caller can tell the operator that cleanup is incomplete.
    """
    problems: list[str] = []
    if _read_state(lambda: am_in_progress(gateway, ctx.repo_root), "am state", problems, False):
        _step(gateway, ["am", "--abort"], problems)
    if _read_state(lambda: cherry_pick_in_progress(gateway), "cherry-pick state", problems, False):
        _step(gateway, ["cherry-pick", "--abort"], problems)
    _step(gateway, ["checkout", ctx.original_branch], problems)
    if _read_state(lambda: branch_exists(gateway, ctx.temp_branch), "branch lookup", problems, True):
        if _step(gateway, ["branch", "-D", ctx.temp_branch], problems):
            ctx.temp_branch_created = False
    else:
        ctx.temp_branch_created = False
    return RestoreResult(ok=not problems, problems=problems)


def discard_temp_branch(ctx: RunContext, gateway: VCSGateway) -> RestoreResult:
    problems: list[str] = []
    if _step(gateway, ["branch", "-D", ctx.temp_branch], problems):
        ctx.temp_branch_created = False
    return RestoreResult(ok=not problems, problems=problems)


def _read_state(check, label: str, problems: list[str], fallback: bool) -> bool:
    try:
        return check()
    except OSError as exc:
        logger.error("Could not read %s: %s", label, exc)
        problems.append(f"{label}: {exc}")
        return fallback


def _step(gateway: VCSGateway, args: list[str], problems: list[str]) -> bool:
    try:
        result = gateway.execute(args)
    except OSError as exc:
        logger.error("git %s could not be started: %s", " ".join(args), exc)
        problems.append(f"git {' '.join(args)}: {exc}")
        return False
    if not result.ok:
        problems.append(_describe(result))
        logger.error("Cleanup step failed: %s", problems[-1])
    return result.ok


def _describe(result: CommandResult) -> str:
    detail = result.stderr.strip() or result.stdout.strip() or f"exit code {result.returncode}"
    return f"git {' '.join(result.args)}: {detail}"
