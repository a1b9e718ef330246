"""Terminal rendition of the operator prompt surface."""

from dataclasses import dataclass, field

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from .config import MessagePlacement
from .services.base import DecisionOption, UserPrompt


@dataclass
class PromptEvent:
    """Something shown to the operator."""
    kind: str
    title: str
    body: str = ""
    duration: float | None = None
    options: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        data = {"kind": self.kind, "title": self.title, "body": self.body}
        if self.duration is not None:
            data["duration"] = self.duration
        if self.options:
            data["options"] = list(self.options)
        return data


class ConsolePrompt(UserPrompt):
    """Renders dialogs and messages with rich.

    `decide` only draws the dialog and remembers its options; the CLI reads
    the operator's answer afterwards and calls the chosen option.
    """

    def __init__(self, console: Console | None = None, quiet: bool = False):
        self.console = console or Console()
        self.quiet = quiet
        self.events: list[PromptEvent] = []
        self.open_options: list[DecisionOption] = []

    def warn(self, title: str, body: str) -> None:
        self.events.append(PromptEvent("warning", title, body))
        if not self.quiet:
            self.console.print(Panel(escape(body), title=f"[yellow]{escape(title)}[/yellow]", subtitle="Acknowledged"))

    def transient_message(self, text: str, duration: float, placement: MessagePlacement) -> None:
        self.events.append(PromptEvent("message", text, duration=duration))
        if not self.quiet:
            self.console.print(f"[bold red]{escape(text)}[/bold red] [dim]({duration:g}s, {placement.value})[/dim]")

    def decide(self, title: str, body: str, options: list[DecisionOption]) -> None:
        self.events.append(PromptEvent("decision", title, body, options=[option.label for option in options]))
        self.open_options = list(options)
        if not self.quiet:
            lines = [escape(body), ""] + [f"[cyan]{i}[/cyan]. {escape(option.label)}" for i, option in enumerate(options, 1)]
            self.console.print(Panel("\n".join(lines), title=f"[yellow]{escape(title)}[/yellow]"))

    def choose(self, key: str) -> DecisionOption:
        """Answer the open decision with the option whose key matches."""
        for option in self.open_options:
            if option.key == key:
                self.open_options = []
                option.on_chosen()
                return option
        raise KeyError(f"No open option with key '{key}'")
