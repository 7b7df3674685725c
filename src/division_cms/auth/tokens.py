"""
division_cms.auth.tokens

Admin token signing and verification.

Token layout: `<base64(payload_json)>.<hex(sha256(payload_json + secret))>`.
The digest covers the decoded payload text followed by the shared secret, so the
issuing service and this one must agree on the secret byte-for-byte.

Responsibilities:
- Verify tokens (structure, expiry, digest) without ever raising to callers.
- Sign tokens in the same format for fixtures and operator tooling.
"""

from __future__ import annotations

import base64
import binascii
import hashlib
import hmac
import time
from collections.abc import Iterable

from pydantic import ValidationError

from division_cms.auth.models import AdminPrincipal, AdminTokenPayload
from division_cms.observability.logging import get_logger

log = get_logger(__name__)


def now_ms() -> int:
    return int(time.time() * 1000)


def token_digest(payload_text: str, secret: str) -> str:
    return hashlib.sha256((payload_text + secret).encode("utf-8")).hexdigest()


def sign_admin_token(principal: AdminPrincipal, secret: str) -> str:
    payload_text = principal.to_payload().model_dump_json()
    encoded = base64.b64encode(payload_text.encode("utf-8")).decode("ascii")
    return f"{encoded}.{token_digest(payload_text, secret)}"


def verify_admin_token(
    token: str,
    secret: str,
    *,
    retired_secrets: Iterable[str] = (),
    now: int | None = None,
) -> AdminPrincipal | None:
    """
    Return the principal for a well-formed, unexpired, correctly signed token.

    Any failure yields None; the reason is logged but never returned.
    `now` is epoch milliseconds and defaults to the current time.
    """

    parts = token.split(".")
    if len(parts) != 2 or not parts[0] or not parts[1]:
        log.info("admin_token_rejected", reason="malformed")
        return None
    encoded, signature = parts

    try:
        payload_text = base64.b64decode(encoded, validate=True).decode("utf-8")
        payload = AdminTokenPayload.model_validate_json(payload_text)
    except (binascii.Error, UnicodeDecodeError, ValidationError):
        log.info("admin_token_rejected", reason="undecodable")
        return None

    current = now_ms() if now is None else now
    if payload.exp <= current:
        log.info("admin_token_rejected", reason="expired", admin_id=str(payload.admin_id))
        return None

    for candidate in (secret, *retired_secrets):
        expected = token_digest(payload_text, candidate)
        if hmac.compare_digest(expected.encode("ascii"), signature.encode("utf-8")):
            return AdminPrincipal.from_payload(payload)

    log.info("admin_token_rejected", reason="bad_signature", admin_id=str(payload.admin_id))
    return None


# --- Module Notes -----------------------------------------------------------
# Issuing tokens to end users (login) is handled by another service; `sign_admin_token`
# only mirrors its format.
