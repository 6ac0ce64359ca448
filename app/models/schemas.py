from typing import List, Optional
from pydantic import BaseModel, Field

from app.core.crypto.key_derivation import KeyVersion
from app.models.message import MessageRecord


class ShareMessageRequest(BaseModel):
    """Request to encrypt a message and append it to the shared log."""
    sender: str = Field(..., description="Display name of the sender")
    password: str = Field(..., description="Shared secret used to derive the key")
    text: str = Field(..., description="Plaintext message")


class DecryptTextRequest(BaseModel):
    """Request to decrypt pasted ciphertext without persisting anything."""
    text: str = Field(..., description="Base64 ciphertext")
    password: str = Field(..., description="Shared secret used to derive the key")
    key_version: KeyVersion = Field(
        KeyVersion.SHA256,
        description="Key derivation that produced the ciphertext"
    )


class DecryptRecordRequest(BaseModel):
    """Request to decrypt a stored message inline."""
    password: str = Field(..., description="Shared secret used to derive the key")


class DecryptResponse(BaseModel):
    """Result of a decryption."""
    text: str
    message_id: Optional[str] = Field(None, description="Source record, for inline decryption")


class MessagePage(BaseModel):
    """One page of the message log, newest first."""
    items: List[MessageRecord]
    page: int = Field(..., description="1-based page number")
    per_page: int
    total: int = Field(..., description="Number of records in the log")
    total_pages: int


class ConfigResponse(BaseModel):
    """Configuration settings exposed to frontend."""
    messages_per_page: int = Field(..., description="Page size of the message log")
    default_key_version: KeyVersion = Field(..., description="Key derivation used for new messages")
    supported_key_versions: List[str] = Field(..., description="Key derivations accepted on decrypt")


class ErrorResponse(BaseModel):
    """Standard error response."""
    detail: str
    code: str
