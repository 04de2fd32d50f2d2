from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

DEFAULT_ALLOWED_COMMANDS = frozenset(
    {"status", "diff", "log", "show", "add", "rm", "mv", "restore", "reset", "commit", "notes"}
)


def _get_env_int(name: str, default: str) -> int:
    return int(os.getenv(name, default))


@dataclass(frozen=True)
class Config:
    repo_root: Path = field(default_factory=Path.cwd)
    target_branch: str = os.getenv("PATCH_REPLAY_TARGET", "main")
    temp_branch: str = os.getenv("PATCH_REPLAY_TEMP_BRANCH", "patch-replay/staging")
    patch_dir: str = os.getenv("PATCH_REPLAY_DIR", "patches")
    patch_suffix: str = os.getenv("PATCH_REPLAY_SUFFIX", ".patch")
    three_way: bool = True
    max_continue_attempts: int = _get_env_int("PATCH_REPLAY_MAX_CONTINUE", "5")
    allowed_commands: frozenset[str] | None = DEFAULT_ALLOWED_COMMANDS
    record_dir: Path | None = None

    def resolved_patch_dir(self) -> Path:
        path = Path(self.patch_dir)
        if path.is_absolute():
            return path
        return Path(self.repo_root) / path
