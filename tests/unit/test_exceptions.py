"""Tests for mfaflow.exceptions module."""

from __future__ import annotations

import pytest

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


class TestMfaFailure:
    """Tests for failures returned inside Err."""

    @pytest.mark.parametrize("cls", [ProviderError, ConfigurationError, TransportError])
    def test_inherits_from_mfa_failure(self, cls) -> None:
        assert issubclass(cls, MfaFailure)
        assert issubclass(cls, MfaFlowError)

    def test_name_and_description(self) -> None:
        err = ProviderError("User is already enrolled.", "access_denied")
        assert err.name == "access_denied"
        assert err.description == "User is already enrolled."
        assert str(err) == "User is already enrolled."

    @pytest.mark.parametrize(
        ("cls", "default_name"),
        [
            (ProviderError, "unknown_error"),
            (ConfigurationError, "configuration_error"),
            (TransportError, "transport_error"),
        ],
    )
    def test_default_names(self, cls, default_name) -> None:
        assert cls("boom").name == default_name

    def test_repr(self) -> None:
        err = TransportError("timed out", "timeout")
        assert repr(err) == "TransportError(name='timeout', description='timed out')"

    def test_configuration_error_is_not_provider_error(self) -> None:
        assert not issubclass(ConfigurationError, ProviderError)


class TestHardFailures:
    """Tests for errors raised rather than returned."""

    @pytest.mark.parametrize(
        "cls", [MalformedResponseError, SessionNotStartedError, InvalidStateError]
    )
    def test_not_returned_failures(self, cls) -> None:
        assert issubclass(cls, MfaFlowError)
        assert not issubclass(cls, MfaFailure)

    def test_malformed_response_status_code(self) -> None:
        err = MalformedResponseError("bad body", status_code=502)
        assert err.status_code == 502
        assert str(err) == "bad body"

    def test_catchable_as_base(self) -> None:
        with pytest.raises(MfaFlowError):
            raise SessionNotStartedError("call start() first")
