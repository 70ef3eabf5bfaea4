"""
End-to-end tests for the namecheap command line.
main() runs for real; only the HTTP transport is replaced.

Run:
    python -m pytest tests/test_cli.py -v
"""

import json
import stat
from unittest.mock import patch

import pytest

from conftest import FakeTransport, api_response
from namecheap_cli.api.client import NamecheapClient
from namecheap_cli.cli import build_parser, main
from namecheap_cli.utils.config import CredentialStore, get_settings


CHECK_RESPONSE = api_response(
    '<DomainCheckResult Domain="example.com" Available="true" IsPremiumName="false" PremiumRegistrationPrice="0" />'
)

BALANCE_RESPONSE = api_response(
    '<UserGetBalancesResult Currency="USD" AvailableBalance="12.50" AccountBalance="12.50" />'
)


@pytest.fixture
def api(credentials):
    """Route every command's client through a FakeTransport"""

    patchers = []

    def start(*bodies):
        transport = FakeTransport(*bodies)
        client = NamecheapClient(credentials=credentials, transport=transport)
        patcher = patch("namecheap_cli.cli.context.create_client", return_value=client)
        patcher.start()
        patchers.append(patcher)
        return transport

    yield start
    for patcher in patchers:
        patcher.stop()


# ===========================================================================
# 1. Parser and help
# ===========================================================================

class TestParser:

    def test_no_command_prints_help(self, capsys):
        assert main([]) == 0
        assert "usage: namecheap" in capsys.readouterr().out

    def test_group_without_subcommand_prints_group_help(self, capsys):
        assert main(["dns"]) == 0
        assert "usage: namecheap dns" in capsys.readouterr().out

    def test_unknown_command_exits_with_usage_error(self):
        with pytest.raises(SystemExit) as exc_info:
            main(["transfer-everything"])
        assert exc_info.value.code == 2

    @pytest.mark.parametrize("argv", [
        ["domains", "list", "--page", "2", "--json"],
        ["dns", "add", "example.com", "www", "A", "203.0.113.10", "--ttl", "600"],
        ["ns", "set", "example.com", "ns1.host.net", "ns2.host.net"],
        ["whoisguard", "list", "--type", "free"],
        ["address", "list"],
        ["users", "pricing", "--tld", "com"],
        ["users", "login", "johndoe", "--password", "user-pass"],
        ["users", "reset-password", "--find-by", "email", "--value", "john@example.com"],
        ["users", "update", "--first-name", "John", "--last-name", "Doe", "--email", "john@example.com",
         "--address1", "1 Main St", "--city", "Austin", "--state", "TX", "--zip", "78701",
         "--country", "US", "--phone", "+1.5551234567"],
    ])
    def test_commands_parse(self, argv):
        args = build_parser().parse_args(argv)
        assert callable(args.func)


# ===========================================================================
# 2. Commands end to end
# ===========================================================================

class TestCommands:

    def test_check_human(self, api, capsys):
        api(CHECK_RESPONSE)

        code = main(["domains", "check", "example.com"])

        out = capsys.readouterr().out
        assert code == 0
        assert "example.com" in out
        assert "Available" in out
        assert "-" in out

    def test_check_json(self, api, capsys):
        transport = api(CHECK_RESPONSE)

        code = main(["domains", "check", "example.com", "--json"])

        document = json.loads(capsys.readouterr().out)
        assert code == 0
        assert document == [{"domain": "example.com", "available": True, "premium": False, "premium_price": None}]
        assert transport.params()["DomainList"] == "example.com"

    def test_invalid_domain_sends_nothing(self, api, capsys):
        transport = api()

        code = main(["domains", "check", "not_a_domain"])

        assert code == 1
        assert "Invalid domain format" in capsys.readouterr().err
        assert transport.requests == []

    def test_remote_error_exit_code(self, api, capsys):
        api(api_response(status="ERROR", errors=[("2019166", "Domain not found")]))

        code = main(["domains", "info", "missing.com", "--json"])

        captured = capsys.readouterr()
        assert code == 1
        assert captured.out == ""
        assert json.loads(captured.err)["error"]["errors"][0]["code"] == "2019166"

    def test_dns_add_writes_full_list(self, api, capsys):
        transport = api(
            api_response(
                '<DomainDNSGetHostsResult Domain="example.com">'
                '<host HostId="11" Name="@" Type="A" Address="203.0.113.10" TTL="1800" />'
                "</DomainDNSGetHostsResult>"
            ),
            api_response('<DomainDNSSetHostsResult Domain="example.com" IsSuccess="true" />'),
        )

        code = main(["dns", "add", "example.com", "www", "A", "203.0.113.11", "--ttl", "600"])

        assert code == 0
        params = transport.params(1)
        assert params["HostName1"] == "@"
        assert params["HostName2"] == "www"
        assert params["TTL2"] == "600"

    def test_register_dry_run(self, api, tmp_path, capsys):
        contact_file = tmp_path / "contact.json"
        contact_file.write_text(json.dumps({
            "first_name": "Jane",
            "last_name": "Doe",
            "address1": "123 Main St",
            "city": "Austin",
            "state_province": "TX",
            "postal_code": "78701",
            "country": "US",
            "phone": "+1.5551234567",
            "email": "jane@example.com",
        }))
        transport = api()

        code = main([
            "domains", "register", "new-domain.com",
            "--contact-file", str(contact_file), "--years", "2", "--dry-run", "--json",
        ])

        params = json.loads(capsys.readouterr().out)
        assert code == 0
        assert transport.requests == []
        assert params["Years"] == 2
        assert params["RegistrantEmailAddress"] == "jane@example.com"
        assert params["AuxBillingEmailAddress"] == "jane@example.com"

    def test_register_with_missing_contact_file(self, api, capsys):
        api()

        code = main(["domains", "register", "new-domain.com", "--contact-file", "/nonexistent.json", "--yes"])

        assert code == 1
        assert "Contact file not found" in capsys.readouterr().err

    def test_not_authenticated(self, capsys):
        code = main(["users", "balances"])

        assert code == 1
        err = capsys.readouterr().err
        assert "Not authenticated" in err
        assert "namecheap auth login" in err

    def test_declined_confirmation(self, api, capsys):
        transport = api()

        with patch("namecheap_cli.utils.prompts.ConsolePrompter.ask", return_value=False):
            code = main(["dns", "rm", "example.com", "11"])

        assert code == 1
        assert "Cancelled." in capsys.readouterr().err
        assert transport.requests == []

    def test_rejected_sub_account_login(self, api, capsys):
        transport = api(api_response('<UserLoginResult UserName="johndoe" LoginSuccess="false" />'))

        code = main(["users", "login", "johndoe", "--password", "user-pass"])

        captured = capsys.readouterr()
        assert code == 1
        assert "Login failed for user: johndoe" in captured.err
        assert "user-pass" not in captured.out + captured.err
        assert transport.params()["UserName"] == "johndoe"

    def test_create_user_without_terms(self, api, capsys):
        transport = api()

        code = main([
            "users", "create", "--username", "newuser", "--password", "user-pass",
            "--first-name", "John", "--last-name", "Doe", "--email", "john@example.com",
            "--address1", "1 Main St", "--city", "Austin", "--state", "TX", "--zip", "78701",
            "--country", "US", "--phone", "+1.5551234567",
        ])

        assert code == 1
        assert "--accept-terms" in capsys.readouterr().err
        assert transport.requests == []


# ===========================================================================
# 3. auth and config
# ===========================================================================

LOGIN_ARGS = ["auth", "login", "--api-user", "apiuser", "--api-key", "super-secret-key", "--client-ip", "203.0.113.10"]


class TestAuth:

    def test_login_verifies_then_stores(self, isolated_settings, capsys):
        transport = FakeTransport(BALANCE_RESPONSE)

        def client_factory(credentials, settings):
            return NamecheapClient(credentials=credentials, settings=settings, transport=transport)

        with patch("namecheap_cli.cli.auth.NamecheapClient", side_effect=client_factory):
            code = main(LOGIN_ARGS)

        captured = capsys.readouterr()
        config_file = isolated_settings / "config.json"
        assert code == 0
        assert "$12.50" in captured.out
        assert "super-secret-key" not in captured.out + captured.err
        assert transport.params()["ApiKey"] == "super-secret-key"

        stored = json.loads(config_file.read_text())
        assert stored["credentials"]["api_user"] == "apiuser"
        assert stored["credentials"]["user_name"] == "apiuser"
        assert stat.S_IMODE(config_file.stat().st_mode) == 0o600

    def test_rejected_login_stores_nothing(self, isolated_settings, capsys):
        transport = FakeTransport(api_response(status="ERROR", errors=[("1011102", "API Key is invalid")]))

        def client_factory(credentials, settings):
            return NamecheapClient(credentials=credentials, settings=settings, transport=transport)

        with patch("namecheap_cli.cli.auth.NamecheapClient", side_effect=client_factory):
            code = main(LOGIN_ARGS)

        assert code == 1
        assert "API Key is invalid" in capsys.readouterr().err
        assert not (isolated_settings / "config.json").exists()

    def test_login_without_verification(self, isolated_settings):
        assert main(LOGIN_ARGS + ["--no-verify", "--sandbox"]) == 0

        credentials = CredentialStore(get_settings()).load()
        assert credentials.api_key == "super-secret-key"
        assert credentials.sandbox is True

    def test_invalid_client_ip(self, capsys):
        code = main(["auth", "login", "--api-user", "u", "--api-key", "k", "--client-ip", "nope", "--no-verify"])

        assert code == 1
        assert "client_ip" in capsys.readouterr().err

    def test_status_masks_key(self, credentials, api, capsys):
        CredentialStore(get_settings()).save(credentials)
        api(BALANCE_RESPONSE)

        code = main(["auth", "status", "--json"])

        status = json.loads(capsys.readouterr().out)
        assert code == 0
        assert status["api_key"] == "***hidden***"
        assert status["connected"] is True
        assert status["available_balance"] == 12.5

    def test_logout(self, credentials, capsys):
        store = CredentialStore(get_settings())
        store.save(credentials)

        code = main(["auth", "logout", "--yes"])

        assert code == 0
        assert store.load() is None


class TestConfigCommands:

    def test_set_then_get(self, capsys):
        assert main(["config", "set", "default_output", "json"]) == 0
        capsys.readouterr()

        assert main(["config", "get", "default_output"]) == 0
        assert json.loads(capsys.readouterr().out) == {"key": "default_output", "value": "json"}

    def test_set_rejects_bad_value(self, capsys):
        code = main(["config", "set", "sandbox", "maybe"])

        assert code == 1
        assert "sandbox must be true or false" in capsys.readouterr().err

    def test_list_hides_api_key(self, credentials, capsys):
        CredentialStore(get_settings()).save(credentials)

        code = main(["config", "list", "--json"])

        out = capsys.readouterr().out
        rows = {row["key"]: row["value"] for row in json.loads(out)}
        assert code == 0
        assert rows["credentials.api_key"] == "***hidden***"
        assert rows["credentials.api_user"] == "apiuser"
        assert "super-secret-key" not in out

    def test_bad_environment_setting(self, monkeypatch, capsys):
        monkeypatch.setenv("NAMECHEAP_LOG_LEVEL", "LOUD")

        assert main(["config", "path"]) == 1
        assert "NAMECHEAP_LOG_LEVEL" in capsys.readouterr().err
