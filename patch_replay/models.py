from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


@dataclass(frozen=True)
class PatchArtifact:
    path: Path
    name: str
    position: int


@dataclass(frozen=True)
class CommitRef:
    sha: str

    @property
    def short(self) -> str:
        return self.sha[:10]


@dataclass
class RunContext:
    """Branch bookkeeping for a single run.

    ``original_branch`` is captured once when the run starts and is the branch
    Restore returns to. ``temp_branch_created`` flips once the temporary branch
    exists so cleanup knows there is something to delete.
    """

    repo_root: Path
    original_branch: str
    target_branch: str
    temp_branch: str
    temp_branch_created: bool = False


class OutcomeKind(str, Enum):
    SUCCESS = "success"
    ABORTED_BY_OPERATOR = "aborted_by_operator"
    FAILED = "failed"


@dataclass(frozen=True)
class RunOutcome:
    kind: OutcomeKind
    reason: str | None = None
    exit_code: int = 0

    @classmethod
    def success(cls) -> "RunOutcome":
        return cls(OutcomeKind.SUCCESS, None, 0)

    @classmethod
    def aborted(cls, reason: str, exit_code: int = 1) -> "RunOutcome":
        return cls(OutcomeKind.ABORTED_BY_OPERATOR, reason, exit_code)

    @classmethod
    def failed(cls, reason: str) -> "RunOutcome":
        return cls(OutcomeKind.FAILED, reason, 1)

    @property
    def is_success(self) -> bool:
        return self.kind is OutcomeKind.SUCCESS


@dataclass
class RestoreResult:
    ok: bool
    problems: list[str] = field(default_factory=list)


@dataclass
class RunReport:
    outcome: RunOutcome
    applied: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    replayed: list[str] = field(default_factory=list)
    restore: RestoreResult | None = None
    timings: dict[str, float] = field(default_factory=dict)
    started_at: str | None = None
    finished_at: str | None = None
    record_path: Path | None = None

    @property
    def exit_code(self) -> int:
        return self.outcome.exit_code
