"""Ceremony options: which challenge type, channels and grant to use."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Literal

ChallengeType = Literal["oob", "otp"]

CHALLENGE_TYPES: tuple[str, ...] = ("oob", "otp")

OOB_GRANT_TYPE = "http://auth0.com/oauth/grant-type/mfa-oob"
OTP_GRANT_TYPE = "http://auth0.com/oauth/grant-type/mfa-otp"

# Channels that deliver the code to a phone and therefore need a number.
PHONE_CHANNELS = frozenset({"sms", "voice"})


@dataclass(frozen=True)
class MfaOptions:
    """Immutable configuration for one MFA ceremony.

    Channel and authenticator collections are stored as tuples, so each
    orchestrator owns its own copy regardless of what the caller passed in.

    Attributes:
        challenge_type: ``"oob"`` (push/SMS/voice code plus binding code) or
            ``"otp"`` (authenticator app code).
        oob_channels: Ordered delivery channels for OOB enrollment.
        authenticator_types: Authenticator kinds requested during enrollment.
        grant_type: OAuth2 grant identifier used for the token exchange.
    """

    challenge_type: ChallengeType = "oob"
    oob_channels: tuple[str, ...] = ("sms",)
    authenticator_types: tuple[str, ...] = ("oob",)
    grant_type: str = OOB_GRANT_TYPE

    def __post_init__(self) -> None:
        if self.challenge_type not in CHALLENGE_TYPES:
            raise ValueError(
                f"MfaOptions.challenge_type must be one of {CHALLENGE_TYPES}, "
                f"got {self.challenge_type!r}"
            )
        object.__setattr__(self, "oob_channels", _as_tuple(self.oob_channels))
        object.__setattr__(self, "authenticator_types", _as_tuple(self.authenticator_types))
        if not self.authenticator_types:
            raise ValueError("MfaOptions.authenticator_types must be non-empty")
        if self.challenge_type == "oob" and not self.oob_channels:
            raise ValueError("MfaOptions.oob_channels must be non-empty for oob challenges")
        if not self.grant_type:
            raise ValueError("MfaOptions.grant_type must be non-empty")

    @classmethod
    def for_otp(cls, grant_type: str = OTP_GRANT_TYPE) -> MfaOptions:
        """Options for an authenticator-app (one-time password) ceremony."""
        return cls(
            challenge_type="otp",
            oob_channels=(),
            authenticator_types=("otp",),
            grant_type=grant_type,
        )

    @property
    def is_oob(self) -> bool:
        return self.challenge_type == "oob"

    @property
    def requires_phone_number(self) -> bool:
        """Whether enrollment must send a phone number."""
        return self.is_oob and any(channel in PHONE_CHANNELS for channel in self.oob_channels)


def _as_tuple(values: Iterable[str] | str) -> tuple[str, ...]:
    if isinstance(values, str):
        return (values,)
    return tuple(values)


DEFAULT_OPTIONS = MfaOptions()
