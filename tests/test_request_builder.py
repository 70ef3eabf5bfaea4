"""
Tests for the request builder: canonical ordering, credential merging and
parameter validation.

Run:
    python -m pytest tests/test_request_builder.py -v
"""

import pytest

from namecheap_cli.api.exceptions import ValidationError
from namecheap_cli.api.request_builder import (
    PRODUCTION_URL,
    SANDBOX_URL,
    build_request,
    endpoint_for,
)
from namecheap_cli.utils.config import Credentials


# ===========================================================================
# 1. Determinism and ordering
# ===========================================================================

class TestCanonicalOrder:

    def test_identical_inputs_give_identical_requests(self, credentials):
        """Same operation, parameters and credentials must encode byte-identically."""
        first = build_request("namecheap.domains.getList", {"PageSize": 20, "Page": 1}, credentials)
        second = build_request("namecheap.domains.getList", {"Page": 1, "PageSize": 20}, credentials)

        assert first == second
        assert first.encoded_params == second.encoded_params

    def test_credentials_come_first_then_command(self, credentials):
        request = build_request("namecheap.domains.check", {"DomainList": "example.com"}, credentials)
        keys = [key for key, _ in request.params]

        assert keys[:5] == ["ApiUser", "ApiKey", "UserName", "ClientIp", "Command"]
        assert dict(request.params)["Command"] == "namecheap.domains.check"

    def test_caller_parameters_sorted_case_insensitively(self, credentials):
        request = build_request("namecheap.domains.dns.getHosts", {"TLD": "com", "sld": "example"}, credentials)
        keys = [key for key, _ in request.params][5:]

        assert keys == ["sld", "TLD"]

    def test_values_are_stringified(self, credentials):
        request = build_request(
            "namecheap.domains.create",
            {"Years": 2, "AddFreeWhoisguard": True},
            credentials,
        )
        params = dict(request.params)

        assert params["Years"] == "2"
        assert params["AddFreeWhoisguard"] == "true"

    def test_none_and_empty_values_are_dropped(self, credentials):
        request = build_request(
            "namecheap.domains.renew",
            {"DomainName": "example.com", "PromotionCode": None, "Note": ""},
            credentials,
        )
        params = dict(request.params)

        assert "PromotionCode" not in params
        assert "Note" not in params
        assert params["DomainName"] == "example.com"

    def test_get_encodes_once(self, credentials):
        request = build_request("namecheap.domains.check", {"DomainList": "a.com,b.com"}, credentials)

        assert "DomainList=a.com%2Cb.com" in request.encoded_params


# ===========================================================================
# 2. Rejected inputs
# ===========================================================================

class TestRejectedInputs:

    @pytest.mark.parametrize("name", ["ApiKey", "apikey", "ClientIp", "Command", "USERNAME"])
    def test_reserved_parameter_rejected(self, credentials, name):
        with pytest.raises(ValidationError, match="reserved"):
            build_request("namecheap.domains.getList", {name: "x"}, credentials)

    def test_case_collision_rejected(self, credentials):
        with pytest.raises(ValidationError, match="collides"):
            build_request("namecheap.domains.getList", {"Page": 1, "page": 2}, credentials)

    @pytest.mark.parametrize("operation", ["", "getList", "namecheap..getList", "namecheap.domains.get-list"])
    def test_malformed_operation_rejected(self, credentials, operation):
        with pytest.raises(ValidationError):
            build_request(operation, {}, credentials)

    def test_unsupported_method_rejected(self, credentials):
        with pytest.raises(ValidationError, match="Unsupported HTTP method"):
            build_request("namecheap.domains.getList", {}, credentials, method="DELETE")


# ===========================================================================
# 3. Environment and redaction
# ===========================================================================

class TestEnvironment:

    def test_production_endpoint_by_default(self, credentials):
        request = build_request("namecheap.users.getBalances", None, credentials)
        assert request.url == PRODUCTION_URL

    def test_sandbox_endpoint(self):
        sandbox = Credentials(
            api_user="apiuser",
            api_key="key",
            user_name="apiuser",
            client_ip="203.0.113.10",
            sandbox=True,
        )
        request = build_request("namecheap.users.getBalances", None, sandbox)

        assert request.url == SANDBOX_URL
        assert endpoint_for(True) == SANDBOX_URL
        assert endpoint_for(False) == PRODUCTION_URL

    def test_redacted_hides_api_key(self, credentials):
        request = build_request("namecheap.users.getBalances", None, credentials)

        assert request.redacted()["ApiKey"] == "***"
        assert "super-secret-key" not in repr(request)
        assert "super-secret-key" not in str(request.redacted())

    def test_redacted_hides_passwords(self, credentials):
        request = build_request(
            "namecheap.users.changePassword",
            {"OldPassword": "old-pass", "NewPassword": "new-pass"},
            credentials,
        )

        redacted = request.redacted()
        assert redacted["OldPassword"] == "***"
        assert redacted["NewPassword"] == "***"

    @pytest.mark.parametrize("operation, params", [
        ("namecheap.users.login", {"Password": "user-pass"}),
        ("namecheap.users.create", {"NewUserName": "newuser", "NewUserPassword": "user-pass"}),
    ])
    def test_redacted_hides_user_passwords(self, credentials, operation, params):
        redacted = build_request(operation, params, credentials, method="POST").redacted()

        assert "user-pass" not in redacted.values()

    @pytest.mark.parametrize("operation, expected", [
        ("namecheap.domains.getList", True),
        ("namecheap.domains.check", True),
        ("namecheap.domains.create", False),
        ("namecheap.domains.dns.setHosts", False),
    ])
    def test_idempotent_operations(self, credentials, operation, expected):
        assert build_request(operation, None, credentials).idempotent is expected
