import math
from typing import Dict, Optional, Union

from app.config import get_settings
from app.core.crypto.errors import CipherError
from app.core.crypto.key_derivation import KeyVersion
from app.core.crypto.message_cipher import decrypt_message, encrypt_message
from app.core.logging import get_logger
from app.models.message import MessageMode, MessageRecord
from app.services.message_store import MessageStore, message_store

logger = get_logger(__name__)


class ChatService:
    """
    Orchestrates encrypted sharing and decryption of chat messages.

    This service:
    - validates user input before anything reaches the cipher
    - encrypts and appends records with the password redacted
    - decrypts pasted ciphertext or stored records on demand
    - paginates the log for display

    Passwords, plaintext and keys are never logged.
    """

    def __init__(self, store: Optional[MessageStore] = None):
        self.settings = get_settings()
        self.store = store if store is not None else message_store

    # -------------------------------------------------
    # Sharing
    # -------------------------------------------------

    def share_encrypted(self, sender: str, password: str, text: str) -> MessageRecord:
        """
        Encrypt a message and append it to the shared log.

        Args:
            sender: display name
            password: shared secret
            text: plaintext message

        Returns:
            The stored record (ciphertext in ``text``)

        Raises:
            ValueError: if any field is empty
        """
        if not text:
            raise ValueError("Message text must not be empty")
        if not sender:
            raise ValueError("Sender must not be empty")
        if not password:
            raise ValueError("Password must not be empty")

        version = self.settings.default_key_version
        record = MessageRecord(
            sender=sender,
            password=self.settings.password_placeholder,
            text=encrypt_message(text, password, version),
            mode=MessageMode.ENCRYPT,
            key_version=version,
        )
        stored = self.store.append(record)
        logger.info("Shared encrypted message %s from %s", stored.id, sender)
        return stored

    # -------------------------------------------------
    # Decryption
    # -------------------------------------------------

    def decrypt_text(
        self,
        text: str,
        password: str,
        version: Union[KeyVersion, str] = KeyVersion.SHA256,
    ) -> str:
        """
        Decrypt pasted ciphertext. Nothing is persisted.

        Raises:
            ValueError: if text is empty
            CipherError: InvalidEncodingError / InvalidTextError
        """
        if not text:
            raise ValueError("Ciphertext must not be empty")
        try:
            return decrypt_message(text, password, version)
        except CipherError as e:
            logger.info("Ad-hoc decryption failed: %s", e.code)
            raise

    def decrypt_record(self, message_id: str, password: str) -> str:
        """
        Decrypt a stored record with the key version it was written with.

        Raises:
            MessageNotFoundError: unknown id
            ValueError: record is not encrypted
            CipherError: InvalidEncodingError / InvalidTextError
        """
        record = self.store.get(message_id)
        if record.mode != MessageMode.ENCRYPT:
            raise ValueError(f"Message '{message_id}' is not encrypted")

        version = record.key_version or KeyVersion.SHA256
        try:
            return decrypt_message(record.text, password, version)
        except CipherError as e:
            logger.info("Inline decryption of %s failed: %s", message_id, e.code)
            raise

    # -------------------------------------------------
    # Display
    # -------------------------------------------------

    def get_page(self, page: int = 1, per_page: Optional[int] = None) -> Dict:
        """
        Slice the newest-first log into a page.

        Pages below 1 clamp to 1. An empty log has 0 pages.
        """
        per_page = per_page or self.settings.messages_per_page
        page = max(page, 1)

        records = self.store.list(newest_first=True)
        total = len(records)
        start = (page - 1) * per_page

        return {
            "items": records[start:start + per_page],
            "page": page,
            "per_page": per_page,
            "total": total,
            "total_pages": math.ceil(total / per_page),
        }


# Global singleton
chat_service = ChatService()
