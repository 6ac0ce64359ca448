from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from app.core.crypto.key_derivation import KeyVersion


# ---------------------------------------------------------
# Enums
# ---------------------------------------------------------

class MessageMode(str, Enum):
    ENCRYPT = "encrypt"
    DECRYPT = "decrypt"


# ---------------------------------------------------------
# Log Record
# ---------------------------------------------------------

class MessageRecord(BaseModel):
    """
    A single entry in the shared message log.

    ``text`` is Base64 ciphertext when ``mode`` is encrypt and plain
    UTF-8 otherwise. ``password`` only ever holds a redaction placeholder.
    """
    id: Optional[str] = None
    sender: str
    password: str = "***"
    text: str
    mode: MessageMode
    key_version: Optional[KeyVersion] = Field(
        default=None,
        description="Key derivation that produced the ciphertext (encrypt mode only)"
    )
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
