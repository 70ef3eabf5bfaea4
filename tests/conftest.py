"""
Shared fixtures: isolated settings, credentials and canned API responses.
No test touches the network or the real user config directory.
"""

from typing import Iterable, Tuple

import pytest

from namecheap_cli.api.client import NamecheapClient
from namecheap_cli.api.transport import RawResponse
from namecheap_cli.utils.config import Credentials, reset_settings


NAMESPACE = "http://api.namecheap.com/xml.response"

ENV_VARS = (
    "NAMECHEAP_API_USER",
    "NAMECHEAP_API_KEY",
    "NAMECHEAP_USER_NAME",
    "NAMECHEAP_CLIENT_IP",
    "NAMECHEAP_SANDBOX",
    "NAMECHEAP_LOG_LEVEL",
    "NAMECHEAP_LOG_FILE",
    "NAMECHEAP_DEFAULT_OUTPUT",
)


def api_response(
    body: str = "",
    status: str = "OK",
    errors: Iterable[Tuple[str, str]] = (),
    warnings: Iterable[Tuple[str, str]] = (),
    command: str = "namecheap.test",
) -> str:
    """Build an ApiResponse document the way the Namecheap API sends it"""
    error_xml = "".join(f'<Error Number="{code}">{message}</Error>' for code, message in errors)
    warning_xml = "".join(f'<Warning Number="{code}">{message}</Warning>' for code, message in warnings)
    command_response = f'<CommandResponse Type="{command}">{body}</CommandResponse>' if status == "OK" else ""
    return (
        '<?xml version="1.0" encoding="utf-8"?>'
        f'<ApiResponse Status="{status}" xmlns="{NAMESPACE}">'
        f"<Errors>{error_xml}</Errors>"
        f"<Warnings>{warning_xml}</Warnings>"
        f"<RequestedCommand>{command}</RequestedCommand>"
        f"{command_response}"
        "<Server>PHX01SBAPIEXT05</Server>"
        "<GMTTimeDifference>--4:00</GMTTimeDifference>"
        "<ExecutionTime>0.011</ExecutionTime>"
        "</ApiResponse>"
    )


class FakeTransport:
    """Transport double replaying canned bodies and recording every request"""

    def __init__(self, *bodies: str):
        self.bodies = list(bodies)
        self.requests = []

    def send(self, request):
        self.requests.append(request)
        if not self.bodies:
            raise AssertionError(f"Unexpected request: {request.operation}")
        return RawResponse(status_code=200, content=self.bodies.pop(0).encode("utf-8"), operation=request.operation)

    def params(self, index: int = 0) -> dict:
        return dict(self.requests[index].params)


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Point the config directory at tmp_path and clear credential env vars"""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("NAMECHEAP_CONFIG_DIR", str(tmp_path / "config"))
    reset_settings()
    yield tmp_path / "config"
    reset_settings()


@pytest.fixture
def credentials():
    return Credentials(
        api_user="apiuser",
        api_key="super-secret-key",
        user_name="apiuser",
        client_ip="203.0.113.10",
    )


@pytest.fixture
def make_client(credentials):
    """Factory returning (client, transport) for a sequence of response bodies"""

    def factory(*bodies: str):
        transport = FakeTransport(*bodies)
        return NamecheapClient(credentials=credentials, transport=transport), transport

    return factory
