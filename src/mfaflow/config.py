"""Configuration management with pydantic-settings."""

from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from mfaflow.options import OOB_GRANT_TYPE, OTP_GRANT_TYPE, MfaOptions
from mfaflow.transport import DEFAULT_TIMEOUT


class MfaFlowSettings(BaseSettings):
    """mfaflow settings loaded from environment variables.

    All settings use the MFAFLOW_ prefix for environment variables. They are
    read by the command line only; library callers pass configuration to
    ``MultiFactorAuthentication`` directly.
    """

    # Provider configuration
    domain: str | None = Field(
        default=None,
        description="Identity provider domain, e.g. tenant.auth0.com",
    )
    client_id: str | None = Field(
        default=None,
        description="OAuth2 client identifier",
    )

    # Ceremony options
    challenge_type: str = Field(
        default="oob",
        description="Challenge type: oob or otp",
    )
    oob_channels: list[str] = Field(
        default_factory=lambda: ["sms"],
        description="OOB delivery channels (JSON list), e.g. [\"sms\"]",
    )
    authenticator_types: list[str] | None = Field(
        default=None,
        description="Authenticator types to enroll (defaults to the challenge type)",
    )
    grant_type: str | None = Field(
        default=None,
        description="Token grant type (defaults to the mfa-oob or mfa-otp grant)",
    )
    timeout: float = Field(
        default=DEFAULT_TIMEOUT,
        description="Deadline in seconds for each provider request",
    )

    # Logging configuration
    log_level: str = Field(default="WARNING", description="Logging level")
    log_format: str = Field(default="console", description="Log format: console or json")

    model_config = SettingsConfigDict(
        env_prefix="MFAFLOW_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    def get_options(self) -> MfaOptions:
        """Build ceremony options from the settings.

        Raises:
            ValueError: If the challenge type or channel settings are invalid.
        """
        if self.challenge_type == "otp":
            default_grant = OTP_GRANT_TYPE
            channels: list[str] = []
        else:
            default_grant = OOB_GRANT_TYPE
            channels = self.oob_channels

        return MfaOptions(
            challenge_type=self.challenge_type,  # type: ignore[arg-type]
            oob_channels=tuple(channels),
            authenticator_types=tuple(self.authenticator_types or [self.challenge_type]),
            grant_type=self.grant_type or default_grant,
        )

    def get_provider_config(self) -> dict[str, Any]:
        """Get the provider connection configuration.

        Returns:
            Keyword arguments for ``MultiFactorAuthentication``.

        Raises:
            ValueError: If the domain or client id is missing.
        """
        if not self.domain:
            raise ValueError("MFAFLOW_DOMAIN environment variable is required")
        if not self.client_id:
            raise ValueError("MFAFLOW_CLIENT_ID environment variable is required")

        return {
            "client_id": self.client_id,
            "domain": self.domain,
            "options": self.get_options(),
            "timeout": self.timeout,
        }


# Global settings instance
_settings: MfaFlowSettings | None = None


def get_settings() -> MfaFlowSettings:
    """Get or create the global settings instance."""
    global _settings
    if _settings is None:
        _settings = MfaFlowSettings()
    return _settings


def reset_settings() -> None:
    """Reset the global settings instance (useful for testing)."""
    global _settings
    _settings = None
