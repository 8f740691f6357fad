"""
sealkit
Stateless helpers for authenticated encryption and compact signed tokens.

Components:
- aes_gcm: AES-256-GCM envelope codec (hex data / iv / tag)
- jwt_codec: HS256 compact token sign / verify with optional exp
Libraries: cryptography (AES-GCM), pydantic (envelope schema)
"""

from .aes_gcm import decrypt, encrypt, generate_key, validate_key
from .errors import (
    DecryptionFailed,
    EnvelopeError,
    InvalidClaims,
    InvalidKey,
    InvalidSignature,
    MalformedEnvelope,
    MalformedToken,
    SealkitError,
    TokenError,
    TokenExpired,
)
from .jwt_codec import sign, verify
from .models import Envelope

__version__ = "1.0.0"

__all__ = [
    'encrypt',
    'decrypt',
    'generate_key',
    'validate_key',
    'sign',
    'verify',
    'Envelope',
    'SealkitError',
    'EnvelopeError',
    'InvalidKey',
    'MalformedEnvelope',
    'DecryptionFailed',
    'TokenError',
    'MalformedToken',
    'InvalidSignature',
    'TokenExpired',
    'InvalidClaims',
]
