"""
Text-safe framing for cipher output.

Ciphertext travels and is stored as RFC 4648 standard Base64 with
padding; plaintext is UTF-8.
"""
import base64
import binascii
import re

from app.core.crypto.errors import InvalidEncodingError, InvalidTextError

_BASE64_PATTERN = re.compile(
    r"(?:[A-Za-z0-9+/]{4})*(?:[A-Za-z0-9+/]{2}==|[A-Za-z0-9+/]{3}=)?"
)


def encode_text(data: bytes) -> str:
    """Render bytes as padded standard Base64."""
    return base64.b64encode(data).decode("ascii")


def decode_text(text: str) -> bytes:
    """
    Decode padded standard Base64.

    Raises:
        InvalidEncodingError: wrong length, characters outside the
            alphabet, or misplaced padding
    """
    if not isinstance(text, str) or not _BASE64_PATTERN.fullmatch(text):
        raise InvalidEncodingError("Input is not valid padded Base64")
    try:
        return base64.b64decode(text, validate=True)
    except (binascii.Error, ValueError) as e:
        raise InvalidEncodingError(f"Input is not valid padded Base64: {e}") from e


def utf8_encode(text: str) -> bytes:
    return text.encode("utf-8")


def utf8_decode(data: bytes) -> str:
    """
    Strict UTF-8 decode.

    Raises:
        InvalidTextError: on malformed byte sequences
    """
    try:
        return bytes(data).decode("utf-8")
    except UnicodeDecodeError as e:
        raise InvalidTextError(f"Bytes are not valid UTF-8 at offset {e.start}") from e
