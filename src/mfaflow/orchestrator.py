"""MFA ceremony orchestration against an OAuth2 identity provider.

A ceremony turns an MFA token (issued after primary authentication) into
final tokens in three provider calls:

- **challenge** (``/mfa/challenge``) triggers an OOB delivery or readies the
  provider for an OTP.
- **enroll** (``/mfa/associate``) associates an authenticator with the account.
- **token** (``/oauth/token``) redeems the MFA token plus proof.

Two provider errors are re-routed instead of surfaced: ``association_required``
from challenge runs enroll, and "already enrolled" from enroll runs challenge.

Example::

    mfa = MultiFactorAuthentication("client-id", "tenant.auth0.com")
    result = await mfa.start(mfa_token, phone_number="+15551234")
    if result.ok:
        tokens = await mfa.complete(input("Code: "))
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any

from mfaflow.exceptions import (
    ConfigurationError,
    InvalidStateError,
    MalformedResponseError,
    MfaFailure,
    ProviderError,
    SessionNotStartedError,
)
from mfaflow.logging import get_logger
from mfaflow.options import DEFAULT_OPTIONS, MfaOptions
from mfaflow.results import Err, Ok, Result, reformat_auth_result
from mfaflow.transport import DEFAULT_TIMEOUT, RequestsTransport, Transport, post_json

LOG = get_logger(__name__)

ASSOCIATION_REQUIRED = "association_required"
ACCESS_DENIED = "access_denied"

# How many times one call may re-route into the other operation. Two allows
# challenge -> enroll -> challenge, and stops a provider from ping-ponging us.
MAX_REROUTES = 2


class MfaState(enum.Enum):
    """Where a ceremony currently stands."""

    UNSTARTED = "unstarted"
    CHALLENGING = "challenging"
    ENROLLING = "enrolling"
    AWAITING_PROOF = "awaiting_proof"
    EXCHANGED = "exchanged"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (MfaState.EXCHANGED, MfaState.FAILED)


@dataclass
class MfaSession:
    """Mutable state of a single ceremony, owned by one orchestrator."""

    mfa_token: str | None = None
    phone_number: str | None = None
    otp: str | None = None
    oob_code: str | None = None
    state: MfaState = MfaState.UNSTARTED

    def require_token(self) -> str:
        """Return the MFA token, or raise if the ceremony was never started."""
        if not self.mfa_token:
            raise SessionNotStartedError("MFA ceremony has not been started; call start() first")
        return self.mfa_token


class MultiFactorAuthentication:
    """Drive one MFA ceremony: challenge or enroll, then exchange for tokens.

    Args:
        client_id: OAuth2 client identifier sent with every request.
        domain: Provider domain, e.g. ``tenant.auth0.com``.
        options: Ceremony options. Defaults to OOB over SMS.
        transport: Transport used for provider calls. Defaults to
            :class:`~mfaflow.transport.RequestsTransport`.
        timeout: Deadline in seconds for each provider call.
    """

    def __init__(
        self,
        client_id: str,
        domain: str,
        options: MfaOptions | None = None,
        *,
        transport: Transport | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        if not client_id:
            raise ValueError("client_id must be non-empty")
        if not domain:
            raise ValueError("domain must be non-empty")
        self.client_id = client_id
        self.domain = domain
        self.url = f"https://{domain}"
        self.options = options or DEFAULT_OPTIONS
        self.transport = transport or RequestsTransport()
        self.timeout = timeout
        self.session = MfaSession()

    @property
    def state(self) -> MfaState:
        return self.session.state

    @property
    def oob_code(self) -> str | None:
        return self.session.oob_code

    # -- entry points -----------------------------------------------------

    async def start(self, mfa_token: str, phone_number: str | None = None) -> Result:
        """Begin the ceremony and trigger the first challenge.

        Covers both enrolled and first-time users: the latter are enrolled
        automatically when the provider asks for an association.

        Args:
            mfa_token: Token from primary authentication.
            phone_number: Required when an ``sms`` or ``voice`` channel is configured.

        Returns:
            ``Ok`` with the challenge (or enrollment) payload, or ``Err``.

        Raises:
            InvalidStateError: If this orchestrator was already started.
        """
        if self.session.state is not MfaState.UNSTARTED:
            raise InvalidStateError(
                f"Cannot start a ceremony in state {self.session.state.value!r}; "
                "create a new MultiFactorAuthentication instead"
            )
        if not mfa_token:
            raise ValueError("mfa_token must be non-empty")

        self.session.mfa_token = mfa_token
        self.session.phone_number = phone_number
        LOG.info(
            "mfa_ceremony_started",
            domain=self.domain,
            challenge_type=self.options.challenge_type,
            has_phone_number=bool(phone_number),
        )
        return await self.challenge()

    async def complete(self, otp: str) -> Result:
        """Submit the user's code and exchange it for tokens.

        Args:
            otp: One-time password (``otp``) or binding code (``oob``).

        Returns:
            ``Ok`` with camel-cased tokens (see
            :func:`~mfaflow.results.reformat_auth_result`), or ``Err``.

        Raises:
            InvalidStateError: If no challenge is awaiting proof.
        """
        if self.session.state is not MfaState.AWAITING_PROOF:
            raise InvalidStateError(
                f"Cannot complete a ceremony in state {self.session.state.value!r}; "
                "call start() and wait for it to succeed first"
            )
        self.session.otp = otp
        result = await self.token()
        if not result.ok:
            return result
        return Ok(reformat_auth_result(result.data))

    # -- provider operations ----------------------------------------------

    async def challenge(self, *, reroutes: int = MAX_REROUTES) -> Result:
        """Ask the provider to send (OOB) or accept (OTP) a verification code.

        May be called again while awaiting proof to resend a code.
        """
        mfa_token = self._require_active()
        self._enter(MfaState.CHALLENGING)

        body = {
            "client_id": self.client_id,
            "mfa_token": mfa_token,
            "challenge_type": self.options.challenge_type,
        }
        result = await self._post("/mfa/challenge", body)
        if not result.ok:
            if reroutes > 0 and result.name == ASSOCIATION_REQUIRED:
                LOG.info("challenge_rerouted_to_enroll", reason=result.name)
                return await self.enroll(reroutes=reroutes - 1)
            return self._fail("challenge", result)

        self._store_oob_code(result.data)
        self._enter(MfaState.AWAITING_PROOF)
        return result

    async def enroll(self, *, reroutes: int = MAX_REROUTES) -> Result:
        """Associate the configured authenticator with the account."""
        mfa_token = self._require_active()
        self._enter(MfaState.ENROLLING)

        body: dict[str, Any] = {
            "client_id": self.client_id,
            "authenticator_types": list(self.options.authenticator_types),
        }
        if self.options.is_oob:
            body["oob_channels"] = list(self.options.oob_channels)
            if self.options.requires_phone_number:
                if not self.session.phone_number:
                    error = ConfigurationError(
                        "phone number is required for "
                        f"{'/'.join(self.options.oob_channels)} enrollment",
                        name="phone_number_required",
                    )
                    return self._fail("enroll", Err(error))
                body["phone_number"] = self.session.phone_number

        headers = {"Authorization": f"Bearer {mfa_token}"}
        result = await self._post("/mfa/associate", body, headers)
        if not result.ok:
            if reroutes > 0 and self.is_already_enrolled(result.error):
                LOG.info("enroll_rerouted_to_challenge", reason=result.name)
                return await self.challenge(reroutes=reroutes - 1)
            return self._fail("enroll", result)

        self._store_oob_code(result.data)
        self._enter(MfaState.AWAITING_PROOF)
        return result

    async def token(self) -> Result:
        """Redeem the MFA token and the user's proof for final tokens.

        Returns:
            ``Ok`` with the raw token payload, or ``Err``. Errors here are
            never recovered from and end the ceremony.

        Raises:
            MalformedResponseError: If a successful response is not a JSON object.
        """
        mfa_token = self._require_active()
        body: dict[str, Any] = {
            "client_id": self.client_id,
            "grant_type": self.options.grant_type,
            "mfa_token": mfa_token,
            "challenge_type": self.options.challenge_type,
        }
        if self.options.is_oob:
            body["oob_code"] = self.session.oob_code
            body["binding_code"] = self.session.otp
        else:
            body["otp"] = self.session.otp

        result = await self._post("/oauth/token", body)
        if not result.ok:
            return self._fail("token", result)

        self._require_object(result.data)
        self._enter(MfaState.EXCHANGED)
        LOG.info("mfa_ceremony_completed", domain=self.domain)
        return result

    @staticmethod
    def is_already_enrolled(error: MfaFailure) -> bool:
        """Whether an enroll error means the authenticator is already associated.

        The provider has no dedicated code for this; it answers
        ``access_denied`` with a description such as "User is already
        enrolled.". The code must match exactly and the description must
        contain both ``already`` and ``enrolled`` (case-sensitive).
        """
        if not isinstance(error, ProviderError) or error.name != ACCESS_DENIED:
            return False
        description = error.description or ""
        if "already" in description and "enrolled" in description:
            # Only the wording separates this from a genuine denial.
            LOG.info("already_enrolled_matched_by_description", error=error.name)
            return True
        LOG.warning(
            "access_denied_without_enrollment_wording",
            error=error.name,
            description=description,
        )
        return False

    # -- helpers ----------------------------------------------------------

    def _require_active(self) -> str:
        mfa_token = self.session.require_token()
        if self.session.state.is_terminal:
            raise InvalidStateError(
                f"Ceremony already ended in state {self.session.state.value!r}"
            )
        return mfa_token

    def _enter(self, state: MfaState) -> None:
        LOG.debug("mfa_state_changed", previous=self.session.state.value, current=state.value)
        self.session.state = state

    def _fail(self, operation: str, result: Err) -> Err:
        LOG.warning(
            "mfa_step_failed",
            operation=operation,
            error=result.name,
            error_type=type(result.error).__name__,
        )
        self._enter(MfaState.FAILED)
        return result

    def _require_object(self, data: Any) -> None:
        if not isinstance(data, dict):
            self._enter(MfaState.FAILED)
            raise MalformedResponseError(
                f"Expected a JSON object from the provider, got {type(data).__name__}"
            )

    def _store_oob_code(self, data: Any) -> None:
        if not self.options.is_oob:
            return
        self._require_object(data)
        self.session.oob_code = data.get("oob_code")
        if self.session.oob_code is None:
            LOG.warning("oob_code_missing_from_response")

    async def _post(
        self,
        path: str,
        body: dict[str, Any],
        headers: dict[str, str] | None = None,
    ) -> Result:
        try:
            return await post_json(
                self.transport,
                f"{self.url}{path}",
                body,
                headers=headers,
                timeout=self.timeout,
            )
        except MalformedResponseError:
            self._enter(MfaState.FAILED)
            raise
