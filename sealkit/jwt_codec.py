"""
sealkit - Compact Token Codec
Signs claims into HS256 compact tokens and verifies them.

Verification Steps:
1. Structural validation (exactly three non-empty ASCII segments)
2. Signature verification (HMAC-SHA256 over the received header.payload)
3. Payload decoding (base64url -> UTF-8 -> JSON object)
4. Expiry check (optional numeric exp, seconds since epoch)
"""

import hashlib
import hmac
import json
import logging
import time
from typing import Any, Dict, Mapping, Union

from .encoding import b64url_decode, b64url_encode, obj_to_base64url
from .errors import InvalidClaims, InvalidSignature, MalformedToken, TokenExpired

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"
HEADER = {"alg": ALGORITHM, "typ": "JWT"}

Secret = Union[str, bytes]


def sign(claims: Mapping[str, Any], secret: Secret) -> str:
    """
    Sign claims and return a compact token.

    Args:
        claims: JSON-serializable mapping (an optional exp is not added here)
        secret: Shared HMAC secret

    Returns:
        "header.payload.signature", each segment base64url without padding

    Raises:
        InvalidClaims: claims is not a mapping, has non-string keys, or cannot be serialized
    """
    if not isinstance(claims, Mapping):
        raise InvalidClaims(f"Claims must be a mapping. Got: {type(claims).__name__}")
    try:
        _check_keys(claims)
        payload_seg = obj_to_base64url(dict(claims))
    except (TypeError, ValueError, RecursionError) as e:
        raise InvalidClaims(f"Claims are not JSON-serializable: {e}")

    header_seg = obj_to_base64url(HEADER)
    signature_seg = _signature(header_seg, payload_seg, secret)

    logger.debug(f"Signed token with {len(claims)} claims")
    return f"{header_seg}.{payload_seg}.{signature_seg}"


def verify(token: str, secret: Secret) -> Dict[str, Any]:
    """
    Verify a token's signature and expiry, then return its claims.

    Args:
        token: Compact token produced by sign()
        secret: Shared HMAC secret

    Returns:
        The decoded claims, unchanged (exp included)

    Raises:
        MalformedToken: Not three ASCII segments, or the payload is not a JSON object
        InvalidSignature: Signature mismatch (wrong secret or tampered token)
        TokenExpired: exp is present and not in the future
    """
    parts = token.split(".") if isinstance(token, str) and token.isascii() else []
    if len(parts) != 3 or not all(parts):
        logger.warning(f"Rejected token: {MalformedToken.code}")
        raise MalformedToken()

    header_seg, payload_seg, signature_seg = parts

    # Nothing in the payload is read before this check
    expected = _signature(header_seg, payload_seg, secret)
    if not hmac.compare_digest(expected.encode("ascii"), signature_seg.encode("ascii")):
        logger.warning(f"Rejected token: {InvalidSignature.code}")
        raise InvalidSignature()

    try:
        claims = json.loads(b64url_decode(payload_seg).decode("utf-8"), parse_constant=_reject_constant)
    except (ValueError, RecursionError) as e:
        logger.warning(f"Rejected token: {MalformedToken.code}")
        raise MalformedToken(f"Invalid token payload: {e}")
    if not isinstance(claims, dict):
        logger.warning(f"Rejected token: {MalformedToken.code}")
        raise MalformedToken("Token payload must be a JSON object")

    exp = claims.get("exp")
    if isinstance(exp, (int, float)) and not isinstance(exp, bool):
        if _now_ms() >= exp * 1000:
            logger.warning(f"Rejected token: {TokenExpired.code}")
            raise TokenExpired()

    logger.debug(f"Verified token with {len(claims)} claims")
    return claims


def _signature(header_seg: str, payload_seg: str, secret: Secret) -> str:
    """HMAC-SHA256 over "header.payload", base64url encoded."""
    if isinstance(secret, str):
        secret = secret.encode("utf-8")
    elif not isinstance(secret, (bytes, bytearray)):
        raise TypeError(f"secret must be str or bytes, not {type(secret).__name__}")

    signing_input = f"{header_seg}.{payload_seg}".encode("utf-8")
    return b64url_encode(hmac.new(secret, signing_input, hashlib.sha256).digest())


def _check_keys(value: Any) -> None:
    """Object keys must already be strings, or JSON would rewrite them."""
    if isinstance(value, Mapping):
        for key, item in value.items():
            if not isinstance(key, str):
                raise InvalidClaims(f"Claim keys must be strings. Got: {key!r}")
            _check_keys(item)
    elif isinstance(value, (list, tuple)):
        for item in value:
            _check_keys(item)


def _reject_constant(name: str) -> Any:
    """NaN and Infinity are not JSON."""
    raise ValueError(f"Invalid JSON constant: {name}")


def _now_ms() -> int:
    """Current time in milliseconds since epoch."""
    return int(time.time() * 1000)
