"""
sealkit - Text / Base64URL Encoding Helpers

Lossless conversions between UTF-8 text, standard base64 and unpadded
base64url, as used to build the segments of a compact token.
"""

import base64
import json
from typing import Any


def to_base64(text: str) -> str:
    """UTF-8 text -> standard (padded) base64."""
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


def from_base64(data: str) -> str:
    """
    Standard base64 -> UTF-8 text.

    Raises binascii.Error on invalid base64 and UnicodeDecodeError when the
    decoded bytes are not UTF-8. Callers translate these into their own
    error types.
    """
    return base64.b64decode(data, validate=True).decode("utf-8")


def to_base64url(b64: str) -> str:
    """Standard base64 -> base64url without padding."""
    return b64.replace("=", "").replace("+", "-").replace("/", "_")


def from_base64url(segment: str) -> str:
    """base64url (padded or not) -> standard padded base64."""
    b64 = segment.replace("-", "+").replace("_", "/")
    return b64 + "=" * (-len(b64) % 4)


def obj_to_base64url(obj: Any) -> str:
    """Serialize an object to compact JSON and encode it as base64url."""
    return to_base64url(to_base64(canonical_json(obj)))


def canonical_json(obj: Any) -> str:
    """
    Compact, deterministic JSON for signing.

    Key order follows the mapping's insertion order; non-ASCII characters
    are kept as-is so the bytes match a plain ``JSON.stringify``. NaN and
    infinities are rejected with ValueError.
    """
    return json.dumps(obj, separators=(",", ":"), ensure_ascii=False, allow_nan=False)


def b64url_encode(raw: bytes) -> str:
    """Raw bytes -> unpadded base64url."""
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")


def b64url_decode(segment: str) -> bytes:
    """
    Unpadded base64url -> raw bytes.

    Characters outside the URL-safe alphabet raise binascii.Error instead
    of being silently dropped; non-ASCII input raises ValueError.
    """
    return base64.b64decode(from_base64url(segment), validate=True)
