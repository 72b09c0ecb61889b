"""Tagged results returned by every orchestrator operation.

Each network step resolves to exactly one of ``Ok`` (provider payload) or
``Err`` (an :class:`~mfaflow.exceptions.MfaFailure`). Both variants expose
``data`` and ``error`` so callers can unpack either way::

    result = await mfa.start(mfa_token, phone_number)
    if not result.ok:
        print(result.description)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal, Union

from mfaflow.exceptions import MfaFailure


@dataclass(frozen=True)
class Ok:
    """Successful step carrying the provider payload."""

    data: Any

    ok: Literal[True] = field(default=True, init=False, repr=False)
    error: None = field(default=None, init=False, repr=False)

    def unwrap(self) -> Any:
        return self.data


@dataclass(frozen=True)
class Err:
    """Failed step carrying the failure that ended it."""

    error: MfaFailure

    ok: Literal[False] = field(default=False, init=False, repr=False)
    data: None = field(default=None, init=False, repr=False)

    @property
    def name(self) -> str:
        return self.error.name

    @property
    def description(self) -> str:
        return self.error.description

    def unwrap(self) -> Any:
        """Raise the carried failure."""
        raise self.error


Result = Union[Ok, Err]


def reformat_auth_result(auth_result: dict[str, Any]) -> dict[str, Any]:
    """Reshape a provider token payload into camel-cased keys.

    Args:
        auth_result: Token endpoint payload (``access_token``, ``expires_in``,
            ``id_token``, ``token_type``, ``scope``).

    Returns:
        Dict with ``accessToken``, ``expiresIn``, ``idToken``, ``tokenType``
        and ``scope``. Missing fields map to ``None``.

    Example:
        >>> reformat_auth_result({"access_token": "at", "token_type": "Bearer"})["accessToken"]
        'at'
    """
    return {
        "accessToken": auth_result.get("access_token"),
        "expiresIn": auth_result.get("expires_in"),
        "idToken": auth_result.get("id_token"),
        "tokenType": auth_result.get("token_type"),
        "scope": auth_result.get("scope"),
    }
