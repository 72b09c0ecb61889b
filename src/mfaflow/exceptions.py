"""Custom exceptions for mfaflow package."""


class MfaFlowError(Exception):
    """Base exception class for all mfaflow errors."""


class MfaFailure(MfaFlowError):
    """An expected failure that is returned to callers inside ``Err``.

    Attributes:
        name: Machine-readable error code (e.g. ``access_denied``).
        description: Human-readable message describing the failure.
    """

    default_name = "mfa_failure"

    def __init__(self, description: str, name: str | None = None) -> None:
        super().__init__(description)
        self.name = name or self.default_name
        self.description = description

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, description={self.description!r})"


class ProviderError(MfaFailure):
    """The identity provider rejected a request with a structured error body."""

    default_name = "unknown_error"


class ConfigurationError(MfaFailure):
    """The ceremony cannot proceed because of caller-supplied configuration.

    Raised before any network call is made, e.g. when an SMS or voice
    channel is configured but no phone number was given to ``start``.
    """

    default_name = "configuration_error"


class TransportError(MfaFailure):
    """The request never produced a response (connection failure, timeout)."""

    default_name = "transport_error"


class MalformedResponseError(MfaFlowError):
    """The provider answered with a body that is not valid JSON.

    Attributes:
        status_code: HTTP status of the offending response.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class SessionNotStartedError(MfaFlowError):
    """An operation needing the MFA token was called before ``start``."""


class InvalidStateError(MfaFlowError):
    """An entry point was called in a state that does not allow it."""
