"""
Request Builder
Turns an operation name and its parameters into a signed wire request
"""

import re
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple
from urllib.parse import urlencode

from namecheap_cli.api.exceptions import ValidationError
from namecheap_cli.utils.config import Credentials


PRODUCTION_URL = "https://api.namecheap.com/xml.response"
SANDBOX_URL = "https://api.sandbox.namecheap.com/xml.response"

RESERVED_PARAMETERS = ("ApiUser", "ApiKey", "UserName", "ClientIp", "Command")
_RESERVED_FOLDED = {name.casefold() for name in RESERVED_PARAMETERS}

# Masked in debug logs
SECRET_PARAMETERS = frozenset({"ApiKey", "Password", "NewUserPassword", "OldPassword", "NewPassword", "ResetCode"})

OPERATION_REGEX = re.compile(r'^[A-Za-z][A-Za-z0-9]*(\.[A-Za-z][A-Za-z0-9]*)+$')

Params = Tuple[Tuple[str, str], ...]


@dataclass(frozen=True)
class WireRequest:
    """A fully-signed request, ready for the transport"""

    operation: str
    method: str
    url: str
    params: Params = field(repr=False)

    @property
    def encoded_params(self) -> str:
        """Parameters URL-encoded once, in canonical order"""
        return urlencode(self.params)

    @property
    def idempotent(self) -> bool:
        """True for read-only operations that are safe to send twice"""
        action = self.operation.rsplit(".", 1)[-1].lower()
        return action.startswith("get") or action == "check"

    def redacted(self) -> Dict[str, str]:
        """Parameters with the API key and passwords masked, for logging"""
        return {k: ("***" if k in SECRET_PARAMETERS else v) for k, v in self.params}


def endpoint_for(sandbox: bool) -> str:
    return SANDBOX_URL if sandbox else PRODUCTION_URL


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def build_request(
    operation: str,
    parameters: Optional[Mapping[str, Any]],
    credentials: Credentials,
    method: str = "GET",
) -> WireRequest:
    """
    Build the canonical wire request for one API call.

    Args:
        operation: Dotted remote procedure name, e.g. 'namecheap.domains.getList'
        parameters: Operation parameters; None and empty values are dropped
        credentials: Credential bundle merged into the request
        method: GET (query string) or POST (form body)

    Returns:
        WireRequest with credentials first, then Command, then the caller's
        parameters sorted by case-folded key

    Raises:
        ValidationError: If the operation name is malformed, a reserved
            parameter is supplied, or two keys differ only by case
    """
    if not operation or not OPERATION_REGEX.match(operation):
        raise ValidationError(f"Invalid operation name: {operation!r}")

    method = method.upper()
    if method not in ("GET", "POST"):
        raise ValidationError(f"Unsupported HTTP method: {method}")

    caller: Dict[str, Tuple[str, str]] = {}
    for raw_key, value in (parameters or {}).items():
        key = str(raw_key).strip()
        folded = key.casefold()
        if not key:
            raise ValidationError("Parameter names must not be empty")
        if folded in _RESERVED_FOLDED:
            raise ValidationError(f"Parameter '{key}' is reserved for credentials")
        if folded in caller:
            raise ValidationError(
                f"Parameter '{key}' collides with '{caller[folded][0]}'"
            )
        if value is None or value == "":
            continue
        caller[folded] = (key, _stringify(value))

    params = (
        ("ApiUser", credentials.api_user),
        ("ApiKey", credentials.api_key),
        ("UserName", credentials.user_name),
        ("ClientIp", credentials.client_ip),
        ("Command", operation),
    ) + tuple(caller[folded] for folded in sorted(caller))

    return WireRequest(
        operation=operation,
        method=method,
        url=endpoint_for(credentials.sandbox),
        params=params,
    )
