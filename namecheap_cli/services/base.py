"""
Shared plumbing for resource services
"""

from typing import Any, Dict

from namecheap_cli.api.client import NamecheapClient, PageCursor
from namecheap_cli.api.exceptions import ProtocolError
from namecheap_cli.utils.logger import get_logger


logger = get_logger(__name__)


def as_dict(value: Any) -> Dict[str, Any]:
    """Payload value as a dict; empty elements come through as ''"""
    return value if isinstance(value, dict) else {}


class BaseService:
    """
    Base class for resource services.

    Public operations return Result values via @returns_result; internal
    helpers raise and are unwrapped by the public operation that calls them.
    """

    def __init__(self, client: NamecheapClient):
        self.client = client

    @staticmethod
    def section(data: Dict[str, Any], key: str) -> Dict[str, Any]:
        """
        Return a required result element of a CommandResponse.

        Raises:
            ProtocolError: If the element is missing
        """
        value = data.get(key)
        if not isinstance(value, dict):
            raise ProtocolError(f"Response is missing {key}")
        return value

    @staticmethod
    def paging(data: Dict[str, Any], cursor: PageCursor) -> PageCursor:
        """
        Cursor updated from a <Paging> element, keeping the request's values as defaults.

        total_items stays None when the server does not report it.
        """
        paging = as_dict(data.get("Paging"))
        total = paging.get("TotalItems")
        try:
            return PageCursor(
                page=int(paging.get("CurrentPage") or cursor.page),
                page_size=int(paging.get("PageSize") or cursor.page_size),
                total_items=int(total) if total not in (None, "") else None,
            )
        except ValueError as e:
            raise ProtocolError(f"Malformed paging information: {e}") from e
