"""Prompt and progress capabilities used by the workflows."""
from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any, ContextManager, Iterator, Optional, Protocol, Sequence

from rich.console import Console
from rich.prompt import Confirm, IntPrompt, Prompt
from rich.status import Status
from rich.table import Table


@dataclass(frozen=True)
class Choice:
    """One selectable row: display columns plus the value it stands for."""

    columns: Sequence[str]
    value: Any


class ProgressReporter(Protocol):
    def update(self, message: str) -> None: ...

    def succeed(self, message: str) -> None: ...

    def fail(self, message: str) -> None: ...


class Interaction(Protocol):
    """Terminal capabilities the workflows depend on."""

    def ask_path(self, message: str, default: str) -> str: ...

    def confirm(self, message: str, default: bool = True) -> bool: ...

    def select(
        self, message: str, choices: Sequence[Choice], headers: Sequence[str] = ()
    ) -> Any: ...

    def spinner(self, message: str) -> ContextManager[ProgressReporter]: ...

    def info(self, message: str) -> None: ...

    def warn(self, message: str) -> None: ...


class _StatusReporter:
    def __init__(self, console: Console, status: Status) -> None:
        self._console = console
        self._status = status
        self.finished = False

    def update(self, message: str) -> None:
        self._status.update(message)

    def succeed(self, message: str) -> None:
        self.finished = True
        self._console.print(f"[green]✔[/] {message}", highlight=False)

    def fail(self, message: str) -> None:
        self.finished = True
        self._console.print(f"[red]✖[/] {message}", highlight=False)


class RichInteraction:
    """:class:`Interaction` backed by :mod:`rich` prompts and spinners.

    With ``assume_yes`` the output filename and save confirmation prompts take
    their defaults without asking. Scan selection always prompts.
    """

    def __init__(self, console: Optional[Console] = None, *, assume_yes: bool = False) -> None:
        self.console = console or Console()
        self.assume_yes = assume_yes

    def ask_path(self, message: str, default: str) -> str:
        if self.assume_yes:
            return default
        return Prompt.ask(message, default=default, console=self.console)

    def confirm(self, message: str, default: bool = True) -> bool:
        if self.assume_yes:
            return True
        return Confirm.ask(message, default=default, console=self.console)

    def select(
        self, message: str, choices: Sequence[Choice], headers: Sequence[str] = ()
    ) -> Any:
        table = Table(show_header=bool(headers))
        table.add_column("#", justify="right")
        for header in headers:
            table.add_column(header)
        for index, choice in enumerate(choices, start=1):
            table.add_row(str(index), *choice.columns)
        self.console.print(table)

        picked = IntPrompt.ask(
            message,
            choices=[str(index) for index in range(1, len(choices) + 1)],
            default=1,
            show_choices=False,
            console=self.console,
        )
        return choices[picked - 1].value

    @contextmanager
    def spinner(self, message: str) -> Iterator[ProgressReporter]:
        with self.console.status(message) as status:
            reporter = _StatusReporter(self.console, status)
            try:
                yield reporter
            except BaseException:
                if not reporter.finished:
                    reporter.fail(message)
                raise

    def info(self, message: str) -> None:
        self.console.print(message, highlight=False)

    def warn(self, message: str) -> None:
        self.console.print(f"[yellow]⚠️  Warning:[/] {message}", highlight=False)


def confirm_output_path(
    interaction: Interaction, default: str, cwd: Optional[Path] = None
) -> Optional[Path]:
    """Ask for the output filename and confirm it; ``None`` means abort."""

    filename = interaction.ask_path("Enter the output filename", default)
    full = (cwd or Path.cwd()) / filename
    full = full.resolve()
    if not interaction.confirm(f"Save to {full}. Continue?", default=True):
        return None
    return full


__all__ = [
    "Choice",
    "Interaction",
    "ProgressReporter",
    "RichInteraction",
    "confirm_output_path",
]
