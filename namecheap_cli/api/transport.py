"""
Transport & Retry Engine
Executes wire requests over HTTP and retries pre-application network failures
"""

import logging
from dataclasses import dataclass
from urllib.parse import urlsplit

import requests
from tenacity import (
    Retrying,
    before_sleep_log,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from namecheap_cli.api.exceptions import (
    AuthenticationError,
    NetworkError,
    ProtocolError,
)
from namecheap_cli.api.request_builder import WireRequest
from namecheap_cli.utils.logger import get_logger


logger = get_logger(__name__)

DEFAULT_TIMEOUT = 8.0
DEFAULT_MAX_ATTEMPTS = 3

# Gateway/throttling statuses mean the request never reached the application
PRE_APPLICATION_STATUSES = frozenset({429, 502, 503, 504})


@dataclass(frozen=True)
class RawResponse:
    """HTTP response body as received, undecoded so the XML declaration picks the charset"""

    status_code: int
    content: bytes
    operation: str


def _is_retryable(exc: BaseException) -> bool:
    return isinstance(exc, NetworkError) and exc.retryable


def _host(request: WireRequest) -> str:
    return urlsplit(request.url).netloc or request.url


class Transport:
    """
    Sends wire requests to the Namecheap API.

    Each attempt has its own timeout. Only NetworkError flagged retryable is
    attempted again, with exponential backoff, up to max_attempts in total.
    """

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        backoff_multiplier: float = 0.5,
        backoff_max: float = 4.0,
        wait=None,
    ):
        """
        Args:
            timeout: Per-attempt timeout in seconds
            max_attempts: Total attempts per request, the first one included
            backoff_multiplier: Exponential backoff multiplier in seconds
            backoff_max: Upper bound on a single sleep
            wait: Optional tenacity wait strategy overriding the backoff
        """
        self.timeout = timeout
        self.max_attempts = max_attempts
        self.wait = wait or wait_exponential(multiplier=backoff_multiplier, min=0, max=backoff_max)

    @classmethod
    def from_settings(cls, settings) -> "Transport":
        return cls(
            timeout=settings.http_timeout,
            max_attempts=settings.max_attempts,
            backoff_multiplier=settings.backoff_multiplier,
            backoff_max=settings.backoff_max,
        )

    def send(self, request: WireRequest) -> RawResponse:
        """
        Send a request, retrying transient network failures.

        Args:
            request: Signed wire request

        Returns:
            RawResponse with the body of the first successful attempt

        Raises:
            NetworkError: If every attempt failed at the transport level
            AuthenticationError: If the endpoint rejected the client (401/403)
            ProtocolError: If a response arrived but could not be used
        """
        retryer = Retrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=self.wait,
            retry=retry_if_exception(_is_retryable),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )
        return retryer(self._attempt, request)

    def _attempt(self, request: WireRequest) -> RawResponse:
        logger.debug(f"{request.method} {request.url} {request.operation}")
        logger.debug(f"Params: {request.redacted()}")

        if request.method == "GET":
            url = f"{request.url}?{request.encoded_params}"
            body = None
            headers = {"Accept": "application/xml"}
        else:
            url = request.url
            body = request.encoded_params
            headers = {
                "Accept": "application/xml",
                "Content-Type": "application/x-www-form-urlencoded",
            }

        try:
            response = requests.request(
                method=request.method,
                url=url,
                data=body,
                headers=headers,
                timeout=self.timeout
            )
        except requests.exceptions.ConnectTimeout:
            raise NetworkError(f"Connection timed out after {self.timeout:g} seconds")

        except requests.exceptions.ReadTimeout:
            # The request was delivered; only read-only calls may be repeated
            raise NetworkError(
                f"No response within {self.timeout:g} seconds",
                retryable=request.idempotent,
            )

        # requests puts the full URL, query string included, into its messages
        except (requests.exceptions.ChunkedEncodingError, requests.exceptions.ContentDecodingError) as e:
            raise ProtocolError(f"Response body from {_host(request)} could not be read ({type(e).__name__})") from None

        except requests.exceptions.ConnectionError as e:
            raise NetworkError(f"Connection error reaching {_host(request)} ({type(e).__name__})") from None

        except requests.exceptions.RequestException as e:
            raise NetworkError(f"Network error reaching {_host(request)} ({type(e).__name__})", retryable=False) from None

        status = response.status_code

        if 200 <= status < 300:
            return RawResponse(status_code=status, content=response.content, operation=request.operation)

        if status in (401, 403):
            raise AuthenticationError(
                f"HTTP {status} from Namecheap API",
                'Check your API credentials with "namecheap auth status"',
            )

        if status in PRE_APPLICATION_STATUSES:
            raise NetworkError(f"HTTP {status} from Namecheap API", status_code=status)

        if 500 <= status < 600:
            raise NetworkError(
                f"HTTP {status} from Namecheap API",
                retryable=request.idempotent,
                status_code=status,
            )

        raise ProtocolError(f"Unexpected HTTP {status} from Namecheap API", status_code=status)
