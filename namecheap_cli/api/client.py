"""
Namecheap API client
Single choke point for authenticated requests: build, send, normalize, classify
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Generic, List, Mapping, Optional, TypeVar

from namecheap_cli.api.exceptions import (
    AuthenticationError,
    ValidationError,
    classify_remote_errors,
)
from namecheap_cli.api.normalizer import ResultEnvelope, normalize
from namecheap_cli.api.request_builder import build_request
from namecheap_cli.api.result import returns_result
from namecheap_cli.api.transport import Transport
from namecheap_cli.utils.config import CredentialStore, Credentials, Settings, get_settings
from namecheap_cli.utils.logger import get_logger


logger = get_logger(__name__)

T = TypeVar("T")

MAX_PAGE_SIZE = 100


@dataclass
class PageCursor:
    """
    Position in a paged listing. Owned by the calling command; the client
    only ever fetches the single page it describes.
    """

    page: int = 1
    page_size: int = 20
    total_items: Optional[int] = None

    def __post_init__(self):
        if self.page < 1:
            raise ValidationError("Page must be 1 or greater")
        if not 1 <= self.page_size <= MAX_PAGE_SIZE:
            raise ValidationError(f"Page size must be between 1 and {MAX_PAGE_SIZE}")
        if self.total_items is not None and self.total_items < 0:
            raise ValidationError("Total items cannot be negative")

    def as_params(self) -> Dict[str, int]:
        return {"Page": self.page, "PageSize": self.page_size}

    @property
    def total_pages(self) -> Optional[int]:
        if self.total_items is None:
            return None
        return max(1, -(-self.total_items // self.page_size))


@dataclass
class Page(Generic[T]):
    """One fetched page of records together with its cursor"""

    items: List[T] = field(default_factory=list)
    cursor: PageCursor = field(default_factory=PageCursor)


class NamecheapClient:
    """
    Client for the Namecheap XML API.

    Credentials are resolved lazily so that commands which never reach the
    API (validation failures, --dry-run) work without them.
    """

    def __init__(
        self,
        credentials: Optional[Credentials] = None,
        store: Optional[CredentialStore] = None,
        settings: Optional[Settings] = None,
        transport: Optional[Transport] = None,
    ):
        """
        Args:
            credentials: Explicit credential bundle; loaded from the store when omitted
            store: Credential store used for lazy loading
            settings: Runtime settings (timeouts, retry policy)
            transport: Transport override, mainly for tests
        """
        self.settings = settings or get_settings()
        self._credentials = credentials
        self._store = store
        self.transport = transport or Transport.from_settings(self.settings)

    @property
    def credentials(self) -> Credentials:
        """
        Credential bundle for this invocation.

        Raises:
            AuthenticationError: If no credentials are configured
        """
        if self._credentials is None:
            store = self._store or CredentialStore(self.settings)
            self._credentials = store.load()
            if self._credentials is None:
                raise AuthenticationError()
        return self._credentials

    def as_user(self, user_name: str) -> "NamecheapClient":
        """Client sending another account's UserName with the same API user and key"""
        credentials = self.credentials.model_copy(update={"user_name": user_name})
        return NamecheapClient(credentials=credentials, settings=self.settings, transport=self.transport)

    @returns_result
    def execute(
        self,
        operation: str,
        params: Optional[Mapping[str, Any]] = None,
        method: str = "GET",
    ) -> ResultEnvelope:
        """
        Run one API call end to end.

        Returns:
            Result carrying the ResultEnvelope, or the classified error if the
            call failed before an envelope could be produced
        """
        request = build_request(operation, params, self.credentials, method=method)
        logger.debug(f"Calling {operation} ({'sandbox' if self.credentials.sandbox else 'production'})")

        envelope = normalize(self.transport.send(request))

        for warning in envelope.warnings:
            logger.warning(f"{operation}: {warning.message}")
        if not envelope.success:
            logger.debug(f"{operation} failed: {[e.code for e in envelope.errors]}")
        return envelope

    def request(
        self,
        operation: str,
        params: Optional[Mapping[str, Any]] = None,
        method: str = "GET",
    ) -> Dict[str, Any]:
        """
        Run one API call and return its payload.

        Raises:
            NamecheapError: Any classified error, including the server's own
                errors as RemoteError or AuthenticationError
        """
        envelope: ResultEnvelope = self.execute(operation, params, method).unwrap()
        if not envelope.success:
            raise classify_remote_errors(envelope.errors)
        return envelope.data or {}

    def post(self, operation: str, params: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        """Same as request(), with parameters sent as a form body"""
        return self.request(operation, params, method="POST")

