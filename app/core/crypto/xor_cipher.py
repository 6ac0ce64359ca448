"""
XOR Cipher Utility

Purpose:
- Repeating-keystream XOR over arbitrary bytes
- Obfuscation only, NOT cryptographic security
- No integrity check: tampering and wrong keys go undetected

The transform is its own inverse; the same call encrypts and decrypts.
"""

from app.core.crypto.errors import InvalidKeyError


def transform(data: bytes, key: bytes) -> bytes:
    """
    XOR each byte of ``data`` with ``key[i % len(key)]``.

    Args:
        data: bytes to transform (may be empty)
        key: keystream bytes, at least one byte long

    Returns:
        bytes of the same length as ``data``

    Raises:
        InvalidKeyError: if the key is empty
    """
    return XORCipher(key).apply(data)


class XORCipher:
    """
    Stateless XOR cipher bound to a single key.
    """

    def __init__(self, key: bytes):
        if not key:
            raise InvalidKeyError("XOR key must not be empty")

        self._key = bytes(key)
        self._key_len = len(self._key)

    def apply(self, data: bytes) -> bytes:
        """
        Apply XOR cipher to input bytes.

        The same method is used for encryption and decryption.

        Args:
            data: raw bytes (encrypted or plain)

        Returns:
            XOR-processed bytes
        """
        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise TypeError("XORCipher expects bytes-like input")

        result = bytearray(len(data))

        for i, byte in enumerate(bytes(data)):
            result[i] = byte ^ self._key[i % self._key_len]

        return bytes(result)
