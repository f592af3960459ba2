"""Interactive channels: the blocking question/answer transport.

The resolver only ever talks to an ``InteractiveChannel``.  Each call blocks
until an answer arrives, so questions are strictly sequential.
"""

from __future__ import annotations

from typing import Optional, Protocol, Sequence

from rich.console import Console
from rich.prompt import Confirm, Prompt

from ..utils import console as default_console


class InteractiveChannel(Protocol):
    def confirm(self, message: str, default: bool = False) -> bool: ...

    def select(self, message: str, choices: Sequence[str], default: Optional[str] = None) -> str: ...

    def text(self, message: str, default: str = "") -> str: ...


class RichPromptChannel:
    """Terminal prompts rendered with ``rich.prompt``."""

    def __init__(self, console: Optional[Console] = None) -> None:
        self.console = console or default_console

    def confirm(self, message: str, default: bool = False) -> bool:
        return Confirm.ask(message, default=default, console=self.console)

    def select(self, message: str, choices: Sequence[str], default: Optional[str] = None) -> str:
        return Prompt.ask(
            message,
            choices=list(choices),
            default=default if default is not None else choices[0],
            console=self.console,
        )

    def text(self, message: str, default: str = "") -> str:
        return Prompt.ask(message, default=default, console=self.console)


class DefaultsChannel:
    """Answers every question with its default without touching the terminal."""

    def confirm(self, message: str, default: bool = False) -> bool:
        return default

    def select(self, message: str, choices: Sequence[str], default: Optional[str] = None) -> str:
        if default is not None and default in choices:
            return default
        return choices[0]

    def text(self, message: str, default: str = "") -> str:
        return default
