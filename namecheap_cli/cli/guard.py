"""
Command Execution Guard
Wraps every command: confirmation, progress, rendering and the exit code
"""

import sys
from typing import Any, Callable, Optional

from namecheap_cli.api.exceptions import NamecheapError
from namecheap_cli.api.result import Result
from namecheap_cli.output.renderer import HUMAN, Schema, render, render_error
from namecheap_cli.utils.logger import get_logger
from namecheap_cli.utils.progress import progress
from namecheap_cli.utils.prompts import ConsolePrompter

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1


class CommandGuard:
    """
    Runs one command body and turns its outcome into output and an exit code.

    The action may return a Result or a plain value, or raise a
    NamecheapError; every classified error is rendered to stderr with exit
    code 1. Any other exception propagates unchanged.
    """

    def __init__(
        self,
        mode: str = HUMAN,
        assume_yes: bool = False,
        prompter: Optional[ConsolePrompter] = None,
        color: Optional[bool] = None,
        show_progress: Optional[bool] = None,
    ):
        self.mode = mode
        self.assume_yes = assume_yes
        self.prompter = prompter or ConsolePrompter()
        self.color = color if color is not None else (mode == HUMAN and sys.stdout.isatty())
        self.show_progress = show_progress if show_progress is not None else (mode == HUMAN and sys.stderr.isatty())

    def run(
        self,
        label: str,
        action: Callable[[], Any],
        schema: Optional[Schema] = None,
        confirm: Optional[str] = None,
    ) -> int:
        """
        Execute a command body.

        Args:
            label: Progress text, e.g. "Checking availability..."
            action: Zero-argument callable running the pipeline
            schema: Human-mode layout of the value
            confirm: Confirmation question; the action only runs if accepted
                or if --yes was given

        Returns:
            Process exit code
        """
        try:
            if confirm and not self.assume_yes and not self.prompter.ask(confirm):
                self._write(sys.stderr, "Cancelled.")
                return EXIT_ERROR

            with progress(label, enabled=self.show_progress):
                outcome = action()

            value = outcome.unwrap() if isinstance(outcome, Result) else outcome

        except NamecheapError as e:
            logger.debug(f"{label} failed with {e.kind} error")
            self._write(sys.stderr, render_error(e, self.mode))
            return EXIT_ERROR

        self._write(sys.stdout, render(value, self.mode, schema, color=self.color))
        return EXIT_OK

    def fail(self, error: NamecheapError) -> int:
        """Render an error raised outside run(), e.g. while parsing input files"""
        self._write(sys.stderr, render_error(error, self.mode))
        return EXIT_ERROR

    @staticmethod
    def _write(stream, text: str) -> None:
        if text:
            stream.write(text + "\n")
            stream.flush()
