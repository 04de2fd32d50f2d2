from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover - import cycle guard
    from .vcs.gateway import CommandResult


class PatchReplayError(RuntimeError):
    """Base class for errors raised by patch-replay."""


class PreconditionError(PatchReplayError):
    """The repository is not in a state where a run may start."""


class GitCommandError(PatchReplayError):
    def __init__(self, result: "CommandResult", message: str | None = None) -> None:
        self.result = result
        detail = result.stderr.strip() or result.stdout.strip()
        text = message or f"git {' '.join(result.args)} failed with exit code {result.returncode}"
        if detail:
            text = f"{text}: {detail}"
        super().__init__(text)
