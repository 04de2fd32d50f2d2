from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum

from ..config import Config
from ..errors import PreconditionError
from ..models import PatchArtifact, RunContext, RunOutcome
from ..operator_io import OperatorIO
from ..vcs.gateway import CommandResult, VCSGateway
from ..vcs.queries import branch_exists, current_branch, has_tracked_changes, inside_work_tree

logger = logging.getLogger(__name__)


class ConflictResolution(str, Enum):
    CONTINUED = "continued"
    SKIPPED = "skipped"
    ABORTED = "aborted"
    EXHAUSTED = "exhausted"


_CONFLICT_CHOICES = {
    "continue": ConflictResolution.CONTINUED,
    "c": ConflictResolution.CONTINUED,
    "skip": ConflictResolution.SKIPPED,
    "s": ConflictResolution.SKIPPED,
    "abort": ConflictResolution.ABORTED,
    "a": ConflictResolution.ABORTED,
}

CONFLICT_USAGE = (
    "Type 'continue' once the conflict is resolved and staged, "
    "'skip' to drop this patch, or 'abort' to undo the whole run."
)


@dataclass
class ApplyResult:
    outcome: RunOutcome
    applied: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)


def capture_original_branch(gateway: VCSGateway, target_branch: str) -> str:
    branch = current_branch(gateway)
    if branch is not None:
        return branch
    if not inside_work_tree(gateway):
        raise PreconditionError(
            "Not a git repository. Run from inside the repository or pass --repo."
        )
    raise PreconditionError(
        f"Not on any branch (detached HEAD). Run: git checkout {target_branch}"
    )


def check_preconditions(ctx: RunContext, gateway: VCSGateway) -> None:
    if ctx.original_branch != ctx.target_branch:
        raise PreconditionError(
            f"You are on branch '{ctx.original_branch}' but the target branch is "
            f"'{ctx.target_branch}'. Run: git checkout {ctx.target_branch}"
        )
    if has_tracked_changes(gateway):
        raise PreconditionError(
            "The working tree has uncommitted changes to tracked files. "
            "Commit or stash them first (git stash)."
        )
    if branch_exists(gateway, ctx.temp_branch):
        raise PreconditionError(
            f"Temporary branch '{ctx.temp_branch}' already exists. Inspect it, then remove it "
            f"with: git branch -D {ctx.temp_branch}"
        )


def create_temp_branch(ctx: RunContext, gateway: VCSGateway) -> None:
    gateway.run(["checkout", "-b", ctx.temp_branch, ctx.target_branch])
    ctx.temp_branch_created = True
    logger.info("Created temporary branch %s from %s", ctx.temp_branch, ctx.target_branch)


def apply_patches(
    ctx: RunContext,
    gateway: VCSGateway,
    operator: OperatorIO,
    patches: list[PatchArtifact],
    config: Config,
) -> ApplyResult:
    result = ApplyResult(outcome=RunOutcome.success())
    total = len(patches)
    for patch in patches:
        operator.say(f"[{patch.position}/{total}] Applying {patch.name}")
        applied = gateway.execute(_am_args(patch, config))
        if applied.ok:
            result.applied.append(patch.name)
            continue
        operator.say(f"Failed to apply {patch.name}", style="red")
        _show_output(operator, applied)
        resolution = resolve_conflict(patch, gateway, operator, config.max_continue_attempts)
        if resolution is ConflictResolution.ABORTED:
            result.outcome = RunOutcome.aborted(f"Aborted while applying {patch.name}")
            return result
        if resolution is ConflictResolution.EXHAUSTED:
            result.outcome = RunOutcome.failed(
                f"{patch.name} still would not apply after {config.max_continue_attempts} "
                "attempts to continue"
            )
            return result
        if resolution is ConflictResolution.SKIPPED:
            result.skipped.append(patch.name)
        else:
            result.applied.append(patch.name)
    operator.say(
        f"Applied {len(result.applied)} of {total} patches onto {ctx.temp_branch}",
        style="green",
    )
    return result


def resolve_conflict(
    patch: PatchArtifact,
    gateway: VCSGateway,
    operator: OperatorIO,
    max_continue_attempts: int,
) -> ConflictResolution:
    failed_continues = 0
    while True:
        answer = operator.ask(f"{patch.name}: continue, skip or abort?").strip().lower()
        choice = _CONFLICT_CHOICES.get(answer)
        if choice is None:
            operator.say(CONFLICT_USAGE, style="yellow")
            continue
        if choice is ConflictResolution.ABORTED:
            return choice
        if choice is ConflictResolution.SKIPPED:
            skipped = gateway.execute(["am", "--skip"])
            if skipped.ok:
                operator.say(f"Skipped {patch.name}", style="yellow")
                return choice
            operator.say("git am --skip failed", style="red")
            _show_output(operator, skipped)
            continue
        continued = gateway.execute(["am", "--continue"])
        if continued.ok:
            operator.say(f"Applied {patch.name} after manual resolution", style="green")
            return choice
        failed_continues += 1
        operator.say(
            f"git am --continue failed ({failed_continues}/{max_continue_attempts})",
            style="red",
        )
        _show_output(operator, continued)
        if failed_continues >= max_continue_attempts:
            operator.say(f"Giving up on {patch.name}; aborting the run.", style="red")
            return ConflictResolution.EXHAUSTED


def _am_args(patch: PatchArtifact, config: Config) -> list[str]:
    args = ["am"]
    if config.three_way:
        args.append("--3way")
    args.append(str(patch.path))
    return args


def _show_output(operator: OperatorIO, result: CommandResult) -> None:
    text = "\n".join(part.strip() for part in (result.stdout, result.stderr) if part.strip())
    if text:
        operator.show(text)
