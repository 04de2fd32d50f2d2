from __future__ import annotations

from rich.console import Console
from rich.markup import escape


class OperatorIO:
    """Line-oriented conversation with the person running the tool."""

    def ask(self, prompt: str) -> str:
        raise NotImplementedError

    def say(self, message: str, style: str | None = None) -> None:
        raise NotImplementedError

    def show(self, text: str) -> None:
        """Display raw command output verbatim."""
        self.say(text)


class ConsoleOperator(OperatorIO):
    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console(highlight=False)

    def ask(self, prompt: str) -> str:
        return self.console.input(f"[bold]{escape(prompt)}[/bold] ")

    def say(self, message: str, style: str | None = None) -> None:
        self.console.print(escape(message), style=style)

    def show(self, text: str) -> None:
        self.console.out(text.rstrip("\n"), highlight=False)
