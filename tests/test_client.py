"""
Tests for NamecheapClient: the build -> send -> normalize -> classify chain.

Run:
    python -m pytest tests/test_client.py -v
"""

import pytest
from unittest.mock import patch, MagicMock
from tenacity import wait_none

from conftest import FakeTransport, api_response
from namecheap_cli.api.client import NamecheapClient, Page, PageCursor
from namecheap_cli.api.exceptions import (
    AuthenticationError,
    ProtocolError,
    RemoteError,
    ValidationError,
)
from namecheap_cli.api.transport import Transport
from namecheap_cli.utils.config import CredentialStore, get_settings


# ===========================================================================
# 1. Successful calls
# ===========================================================================

class TestRequest:

    def test_returns_command_response_payload(self, make_client):
        client, transport = make_client(api_response('<UserGetBalancesResult AvailableBalance="12.50" />'))

        data = client.request("namecheap.users.getBalances")

        assert data["UserGetBalancesResult"]["AvailableBalance"] == "12.50"
        assert transport.requests[0].operation == "namecheap.users.getBalances"
        assert transport.params()["ApiUser"] == "apiuser"

    def test_post_uses_form_method(self, make_client):
        client, transport = make_client(api_response('<DomainDNSSetHostsResult IsSuccess="true" />'))

        client.post("namecheap.domains.dns.setHosts", {"SLD": "example", "TLD": "com"})

        assert transport.requests[0].method == "POST"

    def test_execute_returns_result(self, make_client):
        client, _ = make_client(api_response("<X />"))

        result = client.execute("namecheap.users.getBalances")

        assert result.ok
        assert result.value.success is True


# ===========================================================================
# 2. Error classification
# ===========================================================================

class TestClassification:

    def test_remote_error_keeps_code_and_message(self, make_client):
        client, _ = make_client(api_response(status="ERROR", errors=[("2019166", "Domain not found")]))

        with pytest.raises(RemoteError) as exc_info:
            client.request("namecheap.domains.getInfo", {"DomainName": "missing.com"})

        error = exc_info.value
        assert error.code == "2019166"
        assert error.errors[0].message == "Domain not found"
        assert "Domain not found" in error.message
        assert error.suggestion == "Check the domain name and ensure it is in your account"

    def test_rejected_key_is_auth_error(self, make_client):
        client, _ = make_client(api_response(status="ERROR", errors=[("1011102", "API Key is invalid")]))

        with pytest.raises(AuthenticationError) as exc_info:
            client.request("namecheap.users.getBalances")

        assert "[1011102] API Key is invalid" in exc_info.value.message
        assert exc_info.value.errors[0].code == "1011102"

    def test_ip_not_whitelisted_is_auth_error(self, make_client):
        client, _ = make_client(api_response(status="ERROR", errors=[("1011151", "Invalid request IP")]))

        with pytest.raises(AuthenticationError) as exc_info:
            client.request("namecheap.users.getBalances")

        assert "whitelisted-ips" in exc_info.value.suggestion

    def test_remote_error_still_returns_envelope_from_execute(self, make_client):
        client, _ = make_client(api_response(status="ERROR", errors=[("2030166", "Domain is locked")]))

        result = client.execute("namecheap.domains.setContacts")

        assert result.ok
        assert result.value.success is False
        assert result.value.errors[0].code == "2030166"

    def test_malformed_body_is_not_retried(self, credentials):
        """A protocol failure looks transient but must be surfaced after one attempt."""
        client = NamecheapClient(credentials=credentials, transport=Transport(wait=wait_none()))

        with patch("namecheap_cli.api.transport.requests.request") as mock_request:
            mock_request.return_value = MagicMock(status_code=200, content=b"<ApiResponse Status=")
            result = client.execute("namecheap.domains.getList")

        assert not result.ok
        assert isinstance(result.error, ProtocolError)
        assert mock_request.call_count == 1


# ===========================================================================
# 3. Credentials
# ===========================================================================

class TestCredentials:

    def test_missing_credentials_is_auth_error(self):
        transport = FakeTransport()
        client = NamecheapClient(store=CredentialStore(get_settings()), transport=transport)

        with pytest.raises(AuthenticationError, match="Not authenticated"):
            client.request("namecheap.users.getBalances")

        assert transport.requests == []

    def test_credentials_loaded_from_store(self, credentials):
        store = CredentialStore(get_settings())
        store.save(credentials)
        client = NamecheapClient(store=store, transport=FakeTransport(api_response("<X />")))

        client.request("namecheap.users.getBalances")

        assert client.credentials == credentials

    def test_credentials_loaded_from_environment(self, monkeypatch):
        monkeypatch.setenv("NAMECHEAP_API_USER", "envuser")
        monkeypatch.setenv("NAMECHEAP_API_KEY", "env-key")
        monkeypatch.setenv("NAMECHEAP_CLIENT_IP", "198.51.100.7")
        client = NamecheapClient(transport=FakeTransport())

        assert client.credentials.api_user == "envuser"
        assert client.credentials.user_name == "envuser"


# ===========================================================================
# 4. Paging cursor
# ===========================================================================

class TestPageCursor:

    def test_defaults(self):
        cursor = PageCursor()
        assert cursor.as_params() == {"Page": 1, "PageSize": 20}
        assert cursor.total_pages is None

    def test_total_pages_rounds_up(self):
        assert PageCursor(page=1, page_size=20, total_items=45).total_pages == 3
        assert PageCursor(page=1, page_size=20, total_items=0).total_pages == 1

    @pytest.mark.parametrize("kwargs", [{"page": 0}, {"page_size": 0}, {"page_size": 101}, {"total_items": -1}])
    def test_invalid_cursor(self, kwargs):
        with pytest.raises(ValidationError):
            PageCursor(**kwargs)

    def test_page_defaults_to_empty(self):
        page = Page()
        assert page.items == []
        assert page.cursor.page == 1
