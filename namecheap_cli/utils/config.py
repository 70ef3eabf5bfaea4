"""
Configuration management using Pydantic Settings
Loads runtime settings from the environment and persists credentials
in a per-user JSON config file
"""

import ipaddress
import json
import os
from pathlib import Path
from typing import Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError as PydanticValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from namecheap_cli.api.exceptions import AuthenticationError, ValidationError


OutputFormat = Literal["table", "json"]

CONFIG_KEYS = ("sandbox", "default_output")
READ_ONLY_KEYS = ("credentials.api_user", "credentials.user_name", "credentials.client_ip")


def _validate_ipv4(value: str) -> str:
    try:
        return str(ipaddress.IPv4Address(value.strip()))
    except ipaddress.AddressValueError as e:
        raise ValueError(f"client_ip must be an IPv4 address: {e}") from e


class Settings(BaseSettings):
    """
    Runtime settings loaded from environment variables.
    Credentials set here take precedence over the stored config file.
    """

    model_config = SettingsConfigDict(
        env_prefix="NAMECHEAP_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Credential overrides
    api_user: Optional[str] = Field(default=None, description="Namecheap API user")
    api_key: Optional[str] = Field(default=None, description="Namecheap API key", repr=False)
    user_name: Optional[str] = Field(default=None, description="Account username (defaults to api_user)")
    client_ip: Optional[str] = Field(default=None, description="Whitelisted client IPv4 address")
    sandbox: Optional[bool] = Field(default=None, description="Use the sandbox API environment")

    config_dir: Path = Field(
        default=Path.home() / ".config" / "namecheap-cli",
        description="Directory holding config.json"
    )

    # Logging Configuration
    log_level: str = Field(
        default="WARNING",
        description="Logging level: DEBUG, INFO, WARNING, ERROR, CRITICAL"
    )
    log_file: Optional[Path] = Field(default=None, description="Optional log file path")

    # Transport Configuration
    http_timeout: float = Field(default=8.0, gt=0, lt=10, description="Per-attempt timeout in seconds")
    max_attempts: int = Field(default=3, ge=1, le=5, description="Attempts per request, first included")
    backoff_multiplier: float = Field(default=0.5, ge=0, description="Exponential backoff multiplier")
    backoff_max: float = Field(default=4.0, ge=0, description="Longest sleep between attempts")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is valid"""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"log_level must be one of {valid_levels}")
        return v_upper

    @property
    def config_path(self) -> Path:
        return Path(self.config_dir).expanduser() / "config.json"

    def has_credentials(self) -> bool:
        """Check if the environment supplies a complete credential set"""
        return bool(self.api_user and self.api_key and self.client_ip)


class StoredCredentials(BaseModel):
    """Credentials as persisted on disk"""

    api_user: str
    api_key: str = Field(repr=False)
    user_name: str
    client_ip: str


class StoredConfig(BaseModel):
    """Contents of config.json"""

    credentials: Optional[StoredCredentials] = None
    sandbox: bool = False
    default_output: OutputFormat = "table"


class Credentials(BaseModel):
    """
    Credential bundle used to sign every request.
    Immutable for the lifetime of one invocation and never logged.
    """

    model_config = ConfigDict(frozen=True)

    api_user: str = Field(min_length=1)
    api_key: str = Field(min_length=1, repr=False)
    user_name: str = Field(min_length=1)
    client_ip: str
    sandbox: bool = False

    @field_validator("client_ip")
    @classmethod
    def validate_client_ip(cls, v: str) -> str:
        return _validate_ipv4(v)

    def masked(self) -> dict:
        """Return the credential fields with the API key hidden"""
        return {
            "api_user": self.api_user,
            "user_name": self.user_name,
            "client_ip": self.client_ip,
            "api_key": "***hidden***",
        }


class CredentialStore:
    """
    Reads and writes the per-user config file.

    Credentials come from the environment when all of NAMECHEAP_API_USER,
    NAMECHEAP_API_KEY and NAMECHEAP_CLIENT_IP are set, otherwise from
    config.json.
    """

    def __init__(self, settings: Optional[Settings] = None, path: Optional[Path] = None):
        self.settings = settings or get_settings()
        self.path = Path(path) if path else self.settings.config_path

    def read(self) -> StoredConfig:
        """Return the stored config, or defaults when no file exists"""
        if not self.path.exists():
            return StoredConfig()
        try:
            return StoredConfig.model_validate_json(self.path.read_text(encoding="utf-8"))
        except PydanticValidationError as e:
            raise ValidationError(
                f"Config file {self.path} is invalid: {e.error_count()} problem(s)",
                'Fix the file or run "namecheap auth login" to rewrite it',
            ) from e

    def write(self, config: StoredConfig) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        # Created owner-only; an existing file is tightened before it is rewritten
        fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            os.chmod(self.path, 0o600)
            handle.write(json.dumps(config.model_dump(mode="json"), indent=2))

    def load(self) -> Optional[Credentials]:
        """
        Load the credential bundle.

        Returns:
            Credentials, or None when nothing is configured

        Raises:
            AuthenticationError: If the configured credentials are malformed
        """
        stored = self.read()
        sandbox = self.settings.sandbox if self.settings.sandbox is not None else stored.sandbox

        if self.settings.has_credentials():
            fields = {
                "api_user": self.settings.api_user,
                "api_key": self.settings.api_key,
                "user_name": self.settings.user_name or self.settings.api_user,
                "client_ip": self.settings.client_ip,
            }
        elif stored.credentials is not None:
            fields = stored.credentials.model_dump()
        else:
            return None

        try:
            return Credentials(sandbox=sandbox, **fields)
        except PydanticValidationError as e:
            raise AuthenticationError(
                f"Configured credentials are invalid: {e.errors()[0]['msg']}",
            ) from e

    def save(self, credentials: Credentials) -> None:
        stored = self.read()
        stored.credentials = StoredCredentials(
            api_user=credentials.api_user,
            api_key=credentials.api_key,
            user_name=credentials.user_name,
            client_ip=credentials.client_ip,
        )
        stored.sandbox = credentials.sandbox
        self.write(stored)

    def clear(self) -> bool:
        """Remove stored credentials, returning whether any existed"""
        stored = self.read()
        existed = stored.credentials is not None
        stored.credentials = None
        self.write(stored)
        return existed

    def is_sandbox(self) -> bool:
        if self.settings.sandbox is not None:
            return self.settings.sandbox
        return self.read().sandbox

    def default_output(self) -> OutputFormat:
        return self.read().default_output

    def get_value(self, key: str) -> Union[str, bool, None]:
        stored = self.read()
        if key in CONFIG_KEYS:
            return getattr(stored, key)
        if key in READ_ONLY_KEYS:
            if stored.credentials is None:
                return None
            return getattr(stored.credentials, key.split(".", 1)[1])
        raise ValidationError(
            f"Unknown config key: {key}",
            f"Valid keys: {', '.join(CONFIG_KEYS + READ_ONLY_KEYS)}",
        )

    def set_value(self, key: str, value: str) -> Union[str, bool]:
        stored = self.read()
        if key == "sandbox":
            lowered = value.strip().lower()
            if lowered not in ("true", "false", "yes", "no", "1", "0"):
                raise ValidationError("sandbox must be true or false")
            stored.sandbox = lowered in ("true", "yes", "1")
            parsed = stored.sandbox
        elif key == "default_output":
            if value not in ("table", "json"):
                raise ValidationError('Invalid output format. Use "table" or "json".')
            stored.default_output = value
            parsed = value
        else:
            raise ValidationError(
                f"Unknown config key: {key}",
                f"Settable keys: {', '.join(CONFIG_KEYS)}",
            )
        self.write(stored)
        return parsed


# Singleton instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Get or create the settings singleton instance.

    Returns:
        Settings instance
    """
    global _settings

    if _settings is None:
        _settings = Settings()

    return _settings


def reset_settings():
    """
    Reset the settings singleton (useful for testing)
    """
    global _settings
    _settings = None
