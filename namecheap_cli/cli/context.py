"""
Per-invocation command context and shared argument helpers
"""

import argparse
import json
from pathlib import Path
from typing import Any, Optional

from namecheap_cli.api.client import NamecheapClient, PageCursor
from namecheap_cli.api.exceptions import ValidationError
from namecheap_cli.cli.guard import CommandGuard
from namecheap_cli.output.renderer import HUMAN, STRUCTURED
from namecheap_cli.utils.config import CredentialStore, Settings, get_settings


def create_client(settings: Settings, store: CredentialStore) -> NamecheapClient:
    """Build the API client for this invocation (patched in tests)"""
    return NamecheapClient(store=store, settings=settings)


class CliContext:
    """
    Everything a command needs: settings, credential store, output mode,
    the command guard and a lazily created API client.
    """

    def __init__(
        self,
        args: argparse.Namespace,
        settings: Optional[Settings] = None,
        store: Optional[CredentialStore] = None,
    ):
        self.settings = settings or get_settings()
        self.store = store or CredentialStore(self.settings)

        if getattr(args, "json", False) or self.store.default_output() == "json":
            self.mode = STRUCTURED
        else:
            self.mode = HUMAN

        self.guard = CommandGuard(mode=self.mode, assume_yes=getattr(args, "yes", False))
        self._client: Optional[NamecheapClient] = None

    @property
    def client(self) -> NamecheapClient:
        if self._client is None:
            self._client = create_client(self.settings, self.store)
        return self._client

    @property
    def structured(self) -> bool:
        return self.mode == STRUCTURED


def output_parent() -> argparse.ArgumentParser:
    parent = argparse.ArgumentParser(add_help=False)
    parent.add_argument("--json", action="store_true", help="Output as JSON")
    return parent


def confirm_parent() -> argparse.ArgumentParser:
    parent = argparse.ArgumentParser(add_help=False)
    parent.add_argument("-y", "--yes", action="store_true", help="Skip the confirmation prompt")
    return parent


def add_paging_arguments(parser: argparse.ArgumentParser, page_size: int = 20) -> None:
    parser.add_argument("--page", type=int, default=1, help="Page number (default: 1)")
    parser.add_argument("--page-size", type=int, default=page_size, help=f"Items per page, 1-100 (default: {page_size})")


def cursor_from(args: argparse.Namespace) -> PageCursor:
    """Build the page cursor; invalid values raise ValidationError"""
    return PageCursor(page=args.page, page_size=args.page_size)


def load_json_file(path: str, what: str = "file") -> Any:
    """
    Read a JSON document supplied by the user.

    Raises:
        ValidationError: If the file is missing or not valid JSON
    """
    file_path = Path(path).expanduser()
    if not file_path.is_file():
        raise ValidationError(f"{what.capitalize()} not found: {path}")
    try:
        return json.loads(file_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValidationError(f"Invalid JSON in {what} {path}: {e.msg} (line {e.lineno})") from e
