"""
Tests for settings and the credential store.

Run:
    python -m pytest tests/test_config.py -v
"""

import json
import os
import stat
from unittest.mock import patch

import pytest
from pydantic import ValidationError as PydanticValidationError

from namecheap_cli.api.exceptions import AuthenticationError, ValidationError
from namecheap_cli.utils.config import CredentialStore, Credentials, Settings, get_settings


@pytest.fixture
def store():
    return CredentialStore(get_settings())


# ===========================================================================
# 1. Settings
# ===========================================================================

class TestSettings:

    def test_defaults(self, isolated_settings):
        settings = get_settings()

        assert settings.log_level == "WARNING"
        assert settings.http_timeout == 8.0
        assert settings.max_attempts == 3
        assert settings.config_path == isolated_settings / "config.json"
        assert settings.has_credentials() is False

    def test_log_level_normalized(self, monkeypatch):
        monkeypatch.setenv("NAMECHEAP_LOG_LEVEL", "debug")
        assert Settings().log_level == "DEBUG"

    def test_timeout_must_stay_under_ten_seconds(self, monkeypatch):
        monkeypatch.setenv("NAMECHEAP_HTTP_TIMEOUT", "30")
        with pytest.raises(PydanticValidationError):
            Settings()

    def test_singleton(self):
        assert get_settings() is get_settings()


# ===========================================================================
# 2. Credentials
# ===========================================================================

class TestCredentials:

    def test_client_ip_must_be_ipv4(self):
        with pytest.raises(PydanticValidationError, match="IPv4"):
            Credentials(api_user="u", api_key="k", user_name="u", client_ip="2001:db8::1")

    def test_key_not_in_repr(self, credentials):
        assert "super-secret-key" not in repr(credentials)

    def test_masked(self, credentials):
        masked = credentials.masked()
        assert masked["api_key"] == "***hidden***"
        assert "super-secret-key" not in json.dumps(masked)


# ===========================================================================
# 3. Credential store
# ===========================================================================

class TestCredentialStore:

    def test_nothing_configured(self, store):
        assert store.load() is None
        assert store.default_output() == "table"
        assert store.is_sandbox() is False

    def test_save_and_load(self, store, credentials):
        store.save(credentials)

        assert store.load() == credentials
        assert stat.S_IMODE(store.path.stat().st_mode) == 0o600

    def test_file_is_owner_only_before_the_key_is_written(self, store, credentials):
        modes = []
        real_fdopen = os.fdopen

        def recording_fdopen(fd, *args, **kwargs):
            handle = real_fdopen(fd, *args, **kwargs)
            handle_write = handle.write

            def write(text):
                modes.append(stat.S_IMODE(os.stat(store.path).st_mode))
                return handle_write(text)

            handle.write = write
            return handle

        store.path.parent.mkdir(parents=True)
        store.path.write_text("{}")
        os.chmod(store.path, 0o644)
        previous_umask = os.umask(0o022)
        try:
            with patch("namecheap_cli.utils.config.os.fdopen", side_effect=recording_fdopen):
                store.save(credentials)
        finally:
            os.umask(previous_umask)

        assert modes == [0o600]
        assert store.load() == credentials

    def test_new_file_created_owner_only(self, store, credentials):
        previous_umask = os.umask(0)
        try:
            store.save(credentials)
        finally:
            os.umask(previous_umask)

        assert stat.S_IMODE(store.path.stat().st_mode) == 0o600

    def test_environment_takes_precedence(self, store, credentials, monkeypatch):
        store.save(credentials)
        monkeypatch.setenv("NAMECHEAP_API_USER", "envuser")
        monkeypatch.setenv("NAMECHEAP_API_KEY", "env-key")
        monkeypatch.setenv("NAMECHEAP_CLIENT_IP", "198.51.100.7")

        loaded = CredentialStore(Settings()).load()

        assert loaded.api_user == "envuser"
        assert loaded.user_name == "envuser"

    def test_partial_environment_falls_back_to_file(self, store, credentials, monkeypatch):
        store.save(credentials)
        monkeypatch.setenv("NAMECHEAP_API_USER", "envuser")

        assert CredentialStore(Settings()).load().api_user == "apiuser"

    def test_sandbox_from_environment(self, store, credentials, monkeypatch):
        store.save(credentials)
        monkeypatch.setenv("NAMECHEAP_SANDBOX", "true")

        assert CredentialStore(Settings()).load().sandbox is True

    def test_malformed_stored_credentials(self, store):
        store.path.parent.mkdir(parents=True)
        store.path.write_text(json.dumps({
            "credentials": {"api_user": "u", "api_key": "k", "user_name": "u", "client_ip": "not-an-ip"},
        }))

        with pytest.raises(AuthenticationError, match="invalid"):
            store.load()

    def test_corrupt_file(self, store):
        store.path.parent.mkdir(parents=True)
        store.path.write_text('{"default_output": "xml"}')

        with pytest.raises(ValidationError, match="is invalid"):
            store.read()

    def test_clear(self, store, credentials):
        store.save(credentials)

        assert store.clear() is True
        assert store.clear() is False
        assert store.load() is None

    def test_save_keeps_preferences(self, store, credentials):
        store.set_value("default_output", "json")
        store.save(credentials)

        assert store.default_output() == "json"


# ===========================================================================
# 4. Config keys
# ===========================================================================

class TestConfigValues:

    @pytest.mark.parametrize("raw, expected", [("true", True), ("YES", True), ("0", False), ("false", False)])
    def test_set_sandbox(self, store, raw, expected):
        assert store.set_value("sandbox", raw) is expected
        assert store.get_value("sandbox") is expected

    def test_set_default_output(self, store):
        assert store.set_value("default_output", "json") == "json"
        with pytest.raises(ValidationError):
            store.set_value("default_output", "xml")

    def test_credential_keys_read_only(self, store, credentials):
        store.save(credentials)

        assert store.get_value("credentials.client_ip") == "203.0.113.10"
        with pytest.raises(ValidationError, match="Unknown config key"):
            store.set_value("credentials.client_ip", "198.51.100.7")

    def test_unknown_key(self, store):
        with pytest.raises(ValidationError, match="Unknown config key"):
            store.get_value("colour")
