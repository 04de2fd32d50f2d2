from .commands import CommandPolicy, parse_command
from .engine import ReplayResult, replay_commits
from .review import ReviewDecision, review_commit, run_commands

__all__ = [
    "CommandPolicy",
    "parse_command",
    "ReplayResult",
    "replay_commits",
    "ReviewDecision",
    "review_commit",
    "run_commands",
]
