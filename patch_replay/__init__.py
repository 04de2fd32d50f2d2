from .config import Config
from .models import CommitRef, OutcomeKind, PatchArtifact, RunContext, RunOutcome, RunReport
from .runner import run_patch_replay

__all__ = [
    "Config",
    "CommitRef",
    "OutcomeKind",
    "PatchArtifact",
    "RunContext",
    "RunOutcome",
    "RunReport",
    "run_patch_replay",
]
