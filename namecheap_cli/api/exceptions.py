"""
Classified errors for Namecheap API operations
Every failure that reaches a command is one of five kinds
"""

from typing import Dict, List, Optional


VALIDATION = "validation"
AUTH = "auth"
NETWORK = "network"
PROTOCOL = "protocol"
REMOTE = "remote"


# Remediation hints keyed by Namecheap error number
ERROR_HINTS: Dict[str, str] = {
    "1011102": 'Run "namecheap auth login" to re-authenticate',
    "1011150": "Enable API access at https://ap.www.namecheap.com/settings/tools/apiaccess/",
    "1011151": "Add your IP at https://ap.www.namecheap.com/settings/tools/apiaccess/whitelisted-ips",
    "1011152": 'Use production mode with "namecheap config set sandbox false" or enable sandbox access',
    "1011153": 'Run "namecheap auth login" with the correct username and API key',
    "2019166": "Check the domain name and ensure it is in your account",
    "2030166": 'Unlock the domain first with "namecheap domains unlock <domain>"',
    "2030280": 'Switch to Namecheap DNS with "namecheap ns reset <domain>"',
    "2030288": "Ensure the domain is using Namecheap DNS servers",
    "3031510": "Wait a few minutes before retrying",
    "2011170": "Add funds to your Namecheap account",
    "2011166": "Complete account verification or contact Namecheap support",
    "3024166": "Ensure the domain is unlocked and has a valid auth code",
    "1010104": "Check the command syntax with --help",
    "2010324": "Use a valid domain format like example.com",
    "5050900": "Try again later or contact Namecheap support",
}

# Error numbers that mean the credentials themselves were rejected
AUTH_ERROR_CODES = frozenset({"1011102", "1011150", "1011151", "1011152", "1011153"})


class ApiMessage:
    """A {code, message} pair exactly as reported by the server"""

    __slots__ = ("code", "message")

    def __init__(self, code: str, message: str):
        self.code = code
        self.message = message

    def __eq__(self, other):
        if not isinstance(other, ApiMessage):
            return NotImplemented
        return (self.code, self.message) == (other.code, other.message)

    def __repr__(self):
        return f"ApiMessage(code={self.code!r}, message={self.message!r})"

    def to_dict(self) -> Dict[str, str]:
        return {"code": self.code, "message": self.message}


class NamecheapError(Exception):
    """Base exception for all classified errors"""

    kind = "error"

    def __init__(self, message: str, suggestion: Optional[str] = None):
        self.message = message
        self.suggestion = suggestion
        super().__init__(self.message)

    def __str__(self):
        return self.message


class ValidationError(NamecheapError):
    """Raised when caller input is rejected before any request is sent"""

    kind = VALIDATION


class AuthenticationError(NamecheapError):
    """Raised when credentials are missing or rejected"""

    kind = AUTH

    def __init__(
        self,
        message: str = "Not authenticated",
        suggestion: Optional[str] = 'Run "namecheap auth login" to authenticate',
        errors: Optional[List[ApiMessage]] = None,
    ):
        super().__init__(message, suggestion)
        self.errors = list(errors or [])


class NetworkError(NamecheapError):
    """
    Raised when the request could not be completed at the transport level.

    Only errors flagged ``retryable`` are attempted again; a failure after
    the server may have applied the request is surfaced as-is.
    """

    kind = NETWORK

    def __init__(
        self,
        message: str,
        retryable: bool = True,
        status_code: Optional[int] = None,
    ):
        super().__init__(message, "Check your internet connection and try again")
        self.retryable = retryable
        self.status_code = status_code


class ProtocolError(NamecheapError):
    """Raised when a response arrived but its shape is not recognized"""

    kind = PROTOCOL

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class RemoteError(NamecheapError):
    """Raised when the Namecheap API reports a business error"""

    kind = REMOTE

    def __init__(self, errors: List[ApiMessage], suggestion: Optional[str] = None):
        self.errors = list(errors)
        summary = "; ".join(f"[{e.code}] {e.message}" for e in self.errors) or "Unknown API error"
        super().__init__(summary, suggestion or hint_for(self.errors))

    @property
    def code(self) -> Optional[str]:
        return self.errors[0].code if self.errors else None


def hint_for(errors: List[ApiMessage]) -> Optional[str]:
    """Return the remediation hint of the first error that has one"""
    for error in errors:
        hint = ERROR_HINTS.get(error.code)
        if hint:
            return hint
    return None


def classify_remote_errors(errors: List[ApiMessage]) -> NamecheapError:
    """
    Turn server-reported errors into the matching classified error.

    Args:
        errors: Error entries from a failed response envelope

    Returns:
        AuthenticationError when any entry rejects the credentials,
        RemoteError otherwise
    """
    if any(e.code in AUTH_ERROR_CODES for e in errors):
        message = "; ".join(f"[{e.code}] {e.message}" for e in errors)
        return AuthenticationError(message, hint_for(errors), errors=errors)
    return RemoteError(errors)
