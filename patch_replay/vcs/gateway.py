from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

from ..errors import GitCommandError

logger = logging.getLogger(__name__)


@dataclass
class CommandResult:
    args: list[str]
    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class VCSGateway:
    """Synchronous access to the version-control engine.

    Implementations run one command and hand back its exit status and output.
    They never retry and never interpret the output.
    """

    def execute(self, args: Sequence[str]) -> CommandResult:
        raise NotImplementedError

    def run(self, args: Sequence[str]) -> CommandResult:
        result = self.execute(args)
        if not result.ok:
            raise GitCommandError(result)
        return result


class GitGateway(VCSGateway):
    def __init__(self, repo_root: str | Path, executable: str = "git") -> None:
        self.repo_root = Path(repo_root)
        self.executable = executable

    def execute(self, args: Sequence[str]) -> CommandResult:
        args = list(args)
        logger.debug("git %s (cwd=%s)", " ".join(args), self.repo_root)
        completed = subprocess.run(
            [self.executable, *args],
            cwd=self.repo_root,
            capture_output=True,
            text=True,
        )
        if completed.returncode != 0:
            logger.debug("git %s exited with %s", args[0] if args else "", completed.returncode)
        return CommandResult(
            args=args,
            returncode=completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
        )
