"""
sealkit - Error Taxonomy
Typed failures for the envelope codec and the compact token codec.

Every error carries a stable ``code`` so callers can branch on the kind of
failure without parsing messages.
"""

from typing import Optional


class SealkitError(Exception):
    """Base exception for all sealkit failures."""
    code = "sealkit_error"
    default_message = "Operation failed"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.default_message)


# =============================================================================
# Envelope (AES-256-GCM)
# =============================================================================

class EnvelopeError(SealkitError):
    """Base exception for envelope encryption and decryption failures."""
    code = "envelope_error"


class InvalidKey(EnvelopeError):
    """Raised when key material does not resolve to exactly 32 bytes."""
    code = "invalid_key"
    default_message = "Invalid Key: Key must be 32 bytes (64 hex characters)"


class MalformedEnvelope(EnvelopeError):
    """Raised when an envelope field is not valid hex or has the wrong length."""
    code = "malformed_envelope"
    default_message = "Malformed envelope"


class DecryptionFailed(EnvelopeError):
    """
    Raised when authenticated decryption fails.

    Wrong key, altered ciphertext and altered tag all end up here with the
    same message.
    """
    code = "decryption_failed"
    default_message = "Decryption failed"


# =============================================================================
# Compact token (HS256)
# =============================================================================

class TokenError(SealkitError):
    """Base exception for token signing and verification failures."""
    code = "token_error"


class MalformedToken(TokenError):
    """Raised when a token is not three segments or its payload cannot be parsed."""
    code = "malformed_token"
    default_message = "Invalid token format"


class InvalidSignature(TokenError):
    """Raised when the recomputed signature does not match the token."""
    code = "invalid_signature"
    default_message = "Invalid signature"


class TokenExpired(TokenError):
    """Raised when a correctly signed token carries an ``exp`` in the past."""
    code = "token_expired"
    default_message = "Token expired"


class InvalidClaims(TokenError):
    """Raised when claims cannot be serialized for signing."""
    code = "invalid_claims"
    default_message = "Claims must be a JSON-serializable mapping"
