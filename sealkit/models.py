"""
sealkit - Pydantic Models
Defines the schema of the AES-256-GCM ciphertext envelope.
"""

import json
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import MalformedEnvelope


class Envelope(BaseModel):
    """
    Result of encryption and input of decryption.

    Security properties:
    - Confidentiality: data is AES-256-GCM ciphertext
    - Integrity: tag authenticates data under the key and iv
    - Freshness: iv is drawn at random for every encryption

    Hex content and field lengths are checked by decrypt(), not here, so that
    a bad envelope always surfaces as MalformedEnvelope.
    """
    model_config = ConfigDict(frozen=True, extra="ignore")

    data: str = Field(..., description="Hex encoded ciphertext (same length as the plaintext bytes)")
    iv: str = Field(..., description="Hex encoded 12-byte nonce")
    tag: str = Field(..., description="Hex encoded 16-byte authentication tag")

    def to_json(self) -> str:
        """Serialize to a compact JSON object with data, iv and tag."""
        return self.model_dump_json()

    @classmethod
    def from_json(cls, text: str) -> "Envelope":
        """Parse an envelope from JSON text."""
        try:
            payload = json.loads(text)
        except (TypeError, ValueError) as e:
            raise MalformedEnvelope(f"Envelope is not valid JSON: {e}")
        return cls.from_mapping(payload)

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any]) -> "Envelope":
        """Build an envelope from a dict-like transport payload."""
        if not isinstance(payload, Mapping):
            raise MalformedEnvelope(
                f"Envelope must be an object with data, iv and tag. Got: {type(payload).__name__}"
            )
        try:
            return cls.model_validate(dict(payload))
        except ValidationError as e:
            fields = ", ".join(str(err["loc"][0]) for err in e.errors() if err.get("loc"))
            raise MalformedEnvelope(f"Envelope fields invalid: {fields}")
