"""mfaflow - complete multi-factor authentication against an OAuth2 provider.

Takes the MFA token issued after primary authentication and drives the
provider through challenge, enrollment and token exchange, recovering
automatically when a user is not yet enrolled or already enrolled.

Example::

    from mfaflow import MultiFactorAuthentication
    mfa = MultiFactorAuthentication("client-id", "tenant.auth0.com")
    result = await mfa.start(mfa_token, phone_number="+15551234")
    tokens = await mfa.complete("123456")
    tokens.data["accessToken"]
"""

from mfaflow.config import MfaFlowSettings, get_settings
from mfaflow.exceptions import (
    ConfigurationError,
    InvalidStateError,
    MalformedResponseError,
    MfaFailure,
    MfaFlowError,
    ProviderError,
    SessionNotStartedError,
    TransportError,
)
from mfaflow.options import DEFAULT_OPTIONS, MfaOptions
from mfaflow.orchestrator import MfaSession, MfaState, MultiFactorAuthentication
from mfaflow.results import Err, Ok, Result, reformat_auth_result
from mfaflow.transport import RawResponse, RequestsTransport, Transport, post_json

__version__ = "0.1.0"

__all__ = [
    # Version
    "__version__",
    # Orchestration
    "MultiFactorAuthentication",
    "MfaSession",
    "MfaState",
    # Options
    "MfaOptions",
    "DEFAULT_OPTIONS",
    # Results
    "Ok",
    "Err",
    "Result",
    "reformat_auth_result",
    # Transport
    "Transport",
    "RequestsTransport",
    "RawResponse",
    "post_json",
    # Configuration
    "MfaFlowSettings",
    "get_settings",
    # Exceptions
    "MfaFlowError",
    "MfaFailure",
    "ProviderError",
    "ConfigurationError",
    "TransportError",
    "MalformedResponseError",
    "SessionNotStartedError",
    "InvalidStateError",
]
