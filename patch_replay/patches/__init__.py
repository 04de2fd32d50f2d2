from .discovery import discover_patches
from .applier import (
    ApplyResult,
    ConflictResolution,
    apply_patches,
    capture_original_branch,
    check_preconditions,
    create_temp_branch,
    resolve_conflict,
)

__all__ = [
    "discover_patches",
    "ApplyResult",
    "ConflictResolution",
    "apply_patches",
    "capture_original_branch",
    "check_preconditions",
    "create_temp_branch",
    "resolve_conflict",
]
