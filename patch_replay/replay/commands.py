from __future__ import annotations

import shlex
from dataclasses import dataclass

EXIT_SENTINELS = frozenset({"exit", "done", "q"})


@dataclass(frozen=True)
class CommandPolicy:
    """Which git subcommands the review prompt may run.

    The run-command prompt is an escape hatch: whatever the operator types is
    handed to git with the operator's own privileges. ``allowed=None`` lifts
    the allow-list entirely.
    """

    allowed: frozenset[str] | None

    def permits(self, args: list[str]) -> bool:
        if not args:
            return False
        if self.allowed is None:
            return True
        return args[0] in self.allowed


def parse_command(line: str) -> list[str]:
    args = shlex.split(line)
    if args and args[0] == "git":
        args = args[1:]
    return args
