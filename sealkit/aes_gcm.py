"""
sealkit - AES-256-GCM Envelope Codec
Encrypts UTF-8 strings into a hex {data, iv, tag} envelope and back.

Security Architecture:
- Cipher: AES-256-GCM (via cryptography's AESGCM), no associated data
- Nonce: 12 random bytes from os.urandom for every encryption
- Failure model: one opaque DecryptionFailed for every authentication failure
"""

import binascii
import logging
import os
from typing import Any, Mapping, Union

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from .errors import DecryptionFailed, InvalidKey, MalformedEnvelope
from .models import Envelope

logger = logging.getLogger(__name__)

KEY_SIZE = 32      # AES-256
NONCE_SIZE = 12    # 96-bit GCM nonce
TAG_SIZE = 16      # 128-bit authentication tag

KeyMaterial = Union[bytes, bytearray, memoryview, str]


def validate_key(key: KeyMaterial) -> bytes:
    """
    Resolve key material to exactly 32 bytes.

    Args:
        key: Raw bytes, or a hex string (64 characters)

    Returns:
        The key as bytes

    Raises:
        InvalidKey: Not bytes/hex, not valid hex, or not 32 bytes long
    """
    if isinstance(key, str):
        try:
            key_bytes = binascii.unhexlify(key)
        except ValueError:
            raise InvalidKey("Invalid Key: Key string is not valid hex")
    elif isinstance(key, (bytes, bytearray, memoryview)):
        key_bytes = bytes(key)
    else:
        raise InvalidKey(f"Invalid Key: Expected bytes or hex string. Got: {type(key).__name__}")

    if len(key_bytes) != KEY_SIZE:
        raise InvalidKey()
    return key_bytes


def generate_key() -> str:
    """Generate a random 256-bit key, hex encoded."""
    return os.urandom(KEY_SIZE).hex()


def encrypt(plaintext: str, key: KeyMaterial) -> Envelope:
    """
    Encrypt a string under AES-256-GCM.

    Args:
        plaintext: Text to encrypt (UTF-8 encoded before encryption)
        key: 32 raw bytes or 64 hex characters

    Returns:
        Envelope with hex encoded ciphertext, nonce and tag
    """
    encryption_key = validate_key(key)
    if not isinstance(plaintext, str):
        raise TypeError(f"plaintext must be str, not {type(plaintext).__name__}")

    iv = os.urandom(NONCE_SIZE)
    sealed = AESGCM(encryption_key).encrypt(iv, plaintext.encode("utf-8"), None)

    # AESGCM appends the tag to the ciphertext
    ciphertext, tag = sealed[:-TAG_SIZE], sealed[-TAG_SIZE:]

    logger.debug(f"Encrypted {len(ciphertext)} bytes")
    return Envelope(data=ciphertext.hex(), iv=iv.hex(), tag=tag.hex())


def decrypt(envelope: Union[Envelope, Mapping[str, Any]], key: KeyMaterial) -> str:
    """
    Decrypt an envelope produced by encrypt().

    Args:
        envelope: Envelope, or a mapping with data, iv and tag
        key: The key used for encryption

    Returns:
        The original plaintext

    Raises:
        InvalidKey: Key does not resolve to 32 bytes
        MalformedEnvelope: Field is not hex, or iv/tag has the wrong length
        DecryptionFailed: Wrong key, or tampered data or tag
    """
    encryption_key = validate_key(key)
    if not isinstance(envelope, Envelope):
        envelope = Envelope.from_mapping(envelope)

    iv = _decode_field(envelope.iv, "iv")
    tag = _decode_field(envelope.tag, "tag")
    ciphertext = _decode_field(envelope.data, "data")

    if len(iv) != NONCE_SIZE:
        logger.warning(f"Rejected envelope: iv is {len(iv)} bytes")
        raise MalformedEnvelope(f"iv must be {NONCE_SIZE} bytes. Got: {len(iv)}")
    if len(tag) != TAG_SIZE:
        logger.warning(f"Rejected envelope: tag is {len(tag)} bytes")
        raise MalformedEnvelope(f"tag must be {TAG_SIZE} bytes. Got: {len(tag)}")

    try:
        plaintext = AESGCM(encryption_key).decrypt(iv, ciphertext + tag, None).decode("utf-8")
    except (InvalidTag, UnicodeDecodeError):
        logger.warning(f"Rejected envelope: {DecryptionFailed.code}")
        # Same error, no cause, whatever went wrong
        raise DecryptionFailed() from None

    logger.debug(f"Decrypted {len(ciphertext)} bytes")
    return plaintext


def _decode_field(value: str, name: str) -> bytes:
    """Strict hex decode of one envelope field."""
    try:
        return binascii.unhexlify(value)
    except (TypeError, ValueError):
        logger.warning(f"Rejected envelope: {name} is not valid hex")
        raise MalformedEnvelope(f"{name} is not valid hex")
