"""Utilities for validating Discord interaction signatures."""

from __future__ import annotations

import hmac
import time
from typing import Mapping, Tuple

from nacl.exceptions import BadSignatureError
from nacl.signing import VerifyKey

DISCORD_SIGNATURE_HEADER = "X-Signature-Ed25519"
DISCORD_TIMESTAMP_HEADER = "X-Signature-Timestamp"
REGISTER_SECRET_HEADER = "X-Register-Secret"
DEFAULT_TOLERANCE = 60 * 5  # five minutes


class MissingSignatureHeaders(Exception):
    """Raised when the signature or timestamp header is absent."""


def check_request_headers(headers: Mapping[str, str]) -> Tuple[str, str]:
    """Return ``(signature, timestamp)`` or raise when either is missing."""

    signature = headers.get(DISCORD_SIGNATURE_HEADER) or ""
    timestamp = headers.get(DISCORD_TIMESTAMP_HEADER) or ""

    if not signature or not timestamp:
        raise MissingSignatureHeaders("Missing signature or timestamp")

    return signature, timestamp


def is_valid_discord_request(
    *,
    public_key: str,
    timestamp: str,
    body: bytes,
    signature: str,
    tolerance: int | None = DEFAULT_TOLERANCE,
) -> bool:
    """Verify the Ed25519 signature Discord places over ``timestamp + body``.

    *body* must be the raw request bytes; the caller keeps them for JSON
    decoding afterwards. A *tolerance* of None or 0 disables the replay window.
    """

    if not timestamp or not signature:
        return False

    if tolerance:
        try:
            request_ts = int(timestamp)
        except (TypeError, ValueError):
            return False

        if abs(int(time.time()) - request_ts) > tolerance:
            return False

    try:
        verify_key = VerifyKey(bytes.fromhex(public_key))
        verify_key.verify(timestamp.encode("utf-8") + body, bytes.fromhex(signature))
    except (BadSignatureError, ValueError, TypeError):
        return False

    return True


def is_valid_register_secret(expected: str | None, provided: str | None) -> bool:
    """Compare the shared registration secret in constant time.

    An unset *expected* secret never matches, so registration over HTTP stays
    closed until one is configured.
    """

    if not expected or not provided:
        return False
    return hmac.compare_digest(expected.encode("utf-8"), provided.encode("utf-8"))
