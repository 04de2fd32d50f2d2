from __future__ import annotations

from enum import Enum

from ..models import CommitRef
from ..operator_io import OperatorIO
from ..vcs.gateway import CommandResult, VCSGateway
from .commands import EXIT_SENTINELS, CommandPolicy, parse_command


class ReviewDecision(str, Enum):
    ADVANCE = "advance"
    TERMINATE = "terminate"


MENU = (
    "1) continue  2) amend  3) add files & amend  "
    "4) run command  5) show diff  6) terminate"
)

_CHOICES = {
    "1": "continue",
    "continue": "continue",
    "2": "amend",
    "amend": "amend",
    "3": "add",
    "add": "add",
    "4": "run",
    "run": "run",
    "5": "diff",
    "diff": "diff",
    "6": "terminate",
    "terminate": "terminate",
}


def review_commit(
    commit: CommitRef,
    gateway: VCSGateway,
    operator: OperatorIO,
    policy: CommandPolicy,
) -> ReviewDecision:
    while True:
        operator.say(MENU)
        answer = operator.ask(f"Review {commit.short}:").strip().lower()
        choice = _CHOICES.get(answer)
        if choice == "continue":
            return ReviewDecision.ADVANCE
        if choice == "terminate":
            return ReviewDecision.TERMINATE
        if choice == "amend":
            _amend(gateway, operator)
        elif choice == "add":
            _add_and_amend(gateway, operator)
        elif choice == "run":
            run_commands(gateway, operator, policy)
        elif choice == "diff":
            _report(operator, gateway.execute(["show", "HEAD"]), quiet=False)
        else:
            operator.say(f"Invalid choice: {answer!r}", style="yellow")


def run_commands(gateway: VCSGateway, operator: OperatorIO, policy: CommandPolicy) -> None:
    operator.say("Enter git commands without the 'git' prefix; 'exit' returns to the menu.")
    while True:
        line = operator.ask("git>").strip()
        if line.lower() in EXIT_SENTINELS:
            return
        if not line:
            continue
        try:
            args = parse_command(line)
        except ValueError as exc:
            operator.say(f"Could not parse command: {exc}", style="red")
            continue
        if not policy.permits(args):
            operator.say(
                f"'{args[0] if args else line}' is not an allowed command "
                "(rerun with --unrestricted-commands to lift the allow-list).",
                style="yellow",
            )
            continue
        _report(operator, gateway.execute(args), quiet=False)


def _amend(gateway: VCSGateway, operator: OperatorIO) -> None:
    result = gateway.execute(["commit", "--amend", "--no-edit"])
    _report(operator, result, quiet=True)
    if result.ok:
        operator.say("Commit amended", style="green")


def _add_and_amend(gateway: VCSGateway, operator: OperatorIO) -> None:
    files = operator.ask("Files to add (space separated):").split()
    if not files:
        operator.say("No files given", style="yellow")
        return
    added = gateway.execute(["add", "--", *files])
    if not added.ok:
        _report(operator, added, quiet=True)
        return
    _amend(gateway, operator)


def _report(operator: OperatorIO, result: CommandResult, quiet: bool) -> None:
    if not result.ok:
        operator.say(f"git {' '.join(result.args)} exited with {result.returncode}", style="red")
    elif quiet:
        return
    text = "\n".join(part.rstrip() for part in (result.stdout, result.stderr) if part.strip())
    if text:
        operator.show(text)
