"""Request signing for the Aqara open API.

Every request carries a fresh nonce and millisecond timestamp and an
HMAC-SHA256 signature over a canonical sign string::

    [accesstoken=<token>&]appid=<appId>&keyid=<keyId>&nonce=<nonce>&time=<ms>

All values except the timestamp are lower-cased. The field order is part of
the contract with the Aqara servers and must not change.
"""

from __future__ import annotations

import hashlib
import hmac
import secrets
import time
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, Field

from ..constants import LANG, USER_AGENT

if TYPE_CHECKING:
    from ..config import AqaraConfig

NONCE_BYTES = 16


class SignedRequest(BaseModel):
    """A single signed request, built per call and never reused.

    Attributes:
        nonce: Random hex nonce (original case, sent in the Nonce header).
        timestamp: Epoch milliseconds as a decimal string.
        signature: Hex HMAC-SHA256 of the sign string.
        headers: Complete header set for the HTTP call.
        body: JSON body ``{"intent": ..., "data": ...}``.
    """

    model_config = {"frozen": True}

    nonce: str
    timestamp: str
    signature: str
    headers: dict[str, str] = Field(default_factory=dict)
    body: dict[str, Any] = Field(default_factory=dict)


def generate_nonce() -> str:
    """Return 128 bits of randomness, hex encoded."""
    return secrets.token_hex(NONCE_BYTES)


def current_timestamp() -> str:
    """Return the current epoch time in milliseconds."""
    return str(int(time.time() * 1000))


def build_sign_string(config: AqaraConfig, nonce: str, timestamp: str) -> str:
    """Build the canonical string that gets signed.

    Example:
        >>> build_sign_string(config, "ABC", "1700000000000")
        'appid=myapp&keyid=k1&nonce=abc&time=1700000000000'
    """
    sign_params: list[str] = []

    if config.access_token:
        sign_params.append(f"accesstoken={config.access_token.lower()}")

    sign_params.extend(
        [
            f"appid={config.app_id.lower()}",
            f"keyid={config.key_id.lower()}",
            f"nonce={nonce.lower()}",
            f"time={timestamp}",
        ]
    )
    return "&".join(sign_params)


def compute_signature(app_secret: str, sign_string: str) -> str:
    """Hex HMAC-SHA256 of ``sign_string`` keyed by the app secret."""
    return hmac.new(
        app_secret.encode("utf-8"),
        sign_string.encode("utf-8"),
        hashlib.sha256,
    ).hexdigest()


def build_headers(config: AqaraConfig, nonce: str, timestamp: str, signature: str) -> dict[str, str]:
    """Authentication headers plus the static content headers."""
    headers = {
        "Content-Type": "application/json",
        "User-Agent": USER_AGENT,
        "Appid": config.app_id,
        "Keyid": config.key_id,
        "Nonce": nonce,
        "Time": timestamp,
        "Sign": signature,
        "Lang": LANG,
    }
    if config.access_token:
        headers["Accesstoken"] = config.access_token
    return headers


def build_signed_request(
    config: AqaraConfig,
    intent: str,
    data: dict[str, Any] | None = None,
    *,
    nonce: str | None = None,
    timestamp: str | None = None,
) -> SignedRequest:
    """Sign a request for ``intent`` without touching any shared state.

    Args:
        config: Application credentials.
        intent: Aqara API intent, e.g. ``query.device.list``.
        data: Intent parameters.
        nonce: Fixed nonce (tests only); generated when omitted.
        timestamp: Fixed timestamp (tests only); current time when omitted.

    Returns:
        The signed request with headers and JSON body.
    """
    nonce = nonce or generate_nonce()
    timestamp = timestamp or current_timestamp()
    signature = compute_signature(config.app_secret, build_sign_string(config, nonce, timestamp))

    return SignedRequest(
        nonce=nonce,
        timestamp=timestamp,
        signature=signature,
        headers=build_headers(config, nonce, timestamp, signature),
        body={"intent": str(intent), "data": data if data is not None else {}},
    )
