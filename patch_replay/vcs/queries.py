from __future__ import annotations

from pathlib import Path

from ..models import CommitRef
from .gateway import VCSGateway


def current_branch(gateway: VCSGateway) -> str | None:
    result = gateway.execute(["rev-parse", "--abbrev-ref", "HEAD"])
    if not result.ok:
        return None
    name = result.stdout.strip()
    if not name or name == "HEAD":
        return None
    return name


def branch_exists(gateway: VCSGateway, name: str) -> bool:
    result = gateway.execute(["rev-parse", "--verify", "--quiet", f"refs/heads/{name}"])
    return result.ok


def has_tracked_changes(gateway: VCSGateway) -> bool:
    result = gateway.run(["status", "--porcelain", "--untracked-files=no"])
    return bool(result.stdout.strip())


def divergent_commits(gateway: VCSGateway, base: str, tip: str) -> list[CommitRef]:
    result = gateway.run(["rev-list", "--reverse", f"{base}..{tip}"])
    return [CommitRef(sha=line.strip()) for line in result.stdout.splitlines() if line.strip()]


def commit_subject(gateway: VCSGateway, sha: str) -> str:
    result = gateway.execute(["log", "-1", "--format=%s", sha])
    if not result.ok:
        return ""
    return result.stdout.strip()


def am_in_progress(gateway: VCSGateway, repo_root: Path) -> bool:
    result = gateway.execute(["rev-parse", "--git-path", "rebase-apply"])
    if not result.ok:
        return False
    path = Path(result.stdout.strip())
    if not path.is_absolute():
        path = Path(repo_root) / path
    return path.is_dir()


def cherry_pick_in_progress(gateway: VCSGateway) -> bool:
    result = gateway.execute(["rev-parse", "--verify", "--quiet", "CHERRY_PICK_HEAD"])
    return result.ok


def inside_work_tree(gateway: VCSGateway) -> bool:
    result = gateway.execute(["rev-parse", "--is-inside-work-tree"])
    return result.ok and result.stdout.strip() == "true"
