"""
Interactive prompts on stderr
"""

import sys
from typing import Optional

from rich.console import Console
from rich.prompt import Confirm, Prompt

from namecheap_cli.api.exceptions import ValidationError


class ConsolePrompter:
    """Confirmation and input prompts, kept off stdout so piped output stays clean"""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console(stderr=True)

    def _require_tty(self, what: str) -> None:
        if not sys.stdin.isatty():
            raise ValidationError(f"{what} requires an interactive terminal", "Pass --yes or the values as options")

    def ask(self, prompt: str) -> bool:
        """Ask a yes/no question, defaulting to no"""
        self._require_tty("Confirmation")
        return Confirm.ask(prompt, default=False, console=self.console)

    def text(self, prompt: str, default: Optional[str] = None, password: bool = False) -> str:
        self._require_tty("Input")
        return Prompt.ask(prompt, default=default, password=password, console=self.console)
