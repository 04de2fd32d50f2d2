from __future__ import annotations

import logging
from dataclasses import dataclass, field

from ..models import RunContext, RunOutcome
from ..operator_io import OperatorIO
from ..vcs.gateway import VCSGateway
from ..vcs.queries import commit_subject, divergent_commits
from .commands import CommandPolicy
from .review import ReviewDecision, review_commit

logger = logging.getLogger(__name__)


@dataclass
class ReplayResult:
    outcome: RunOutcome
    replayed: list[str] = field(default_factory=list)


def replay_commits(
    ctx: RunContext,
    gateway: VCSGateway,
    operator: OperatorIO,
    policy: CommandPolicy,
) -> ReplayResult:
    """Cherry-pick the staged commits onto the target branch, oldest first.

    A failed cherry-pick ends the run. Unlike patch application there is no
    skip here: later commits were staged on top of the failing one, so
    dropping it would replay them against a history they were never applied to.
    """
    gateway.run(["checkout", ctx.target_branch])
    commits = divergent_commits(gateway, ctx.target_branch, ctx.temp_branch)
    result = ReplayResult(outcome=RunOutcome.success())
    if not commits:
        operator.say(f"Nothing to replay: {ctx.temp_branch} has no commits beyond {ctx.target_branch}")
        return result

    total = len(commits)
    for index, commit in enumerate(commits, start=1):
        subject = commit_subject(gateway, commit.sha)
        operator.say(f"[{index}/{total}] Replaying {commit.short} {subject}")
        picked = gateway.execute(["cherry-pick", commit.sha])
        if not picked.ok:
            logger.warning("cherry-pick of %s failed with exit code %s", commit.sha, picked.returncode)
            remaining = [pending.sha for pending in commits[index - 1 :]]
            _explain_replay_failure(ctx, operator, remaining, subject, picked.stderr or picked.stdout)
            result.outcome = RunOutcome.failed(f"Replay of {commit.sha} failed")
            return result
        result.replayed.append(commit.sha)
        decision = review_commit(commit, gateway, operator, policy)
        if decision is ReviewDecision.TERMINATE:
            result.outcome = RunOutcome.aborted(
                f"Terminated by operator after replaying {commit.short}", exit_code=0
            )
            return result

    operator.say(f"Replayed {total} commit(s) onto {ctx.target_branch}", style="green")
    return result


def _explain_replay_failure(
    ctx: RunContext,
    operator: OperatorIO,
    remaining: list[str],
    subject: str,
    output: str,
) -> None:
    """Print how to finish the replay by hand.

    ``remaining`` starts with the failing commit. The temporary branch is
    deleted by the rollback, so every sha still to be replayed is listed.
    """
    sha = remaining[0]
    operator.say(f"Could not replay commit {sha} ({subject}) onto {ctx.target_branch}", style="red")
    if output.strip():
        operator.show(output.strip())
    operator.say(
        f"Commits replayed before it stay on {ctx.target_branch}. The run will now be rolled back; "
        f"{len(remaining)} commit(s) are left. To finish by hand afterwards run:"
    )
    operator.show(f"  git checkout {ctx.target_branch}\n  git cherry-pick {' '.join(remaining)}")
    operator.say(
        "After each conflict, resolve it, git add the files and run: git cherry-pick --continue"
    )
