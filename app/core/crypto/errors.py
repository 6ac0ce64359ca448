"""
Cipher error types.

Each error carries a stable ``code`` so callers can tell a malformed
ciphertext apart from a bad decryption without parsing messages.
"""


class CipherError(ValueError):
    """Base class for all cipher and codec failures."""

    code = "cipher_error"


class InvalidKeyError(CipherError):
    """Key material is empty or otherwise unusable."""

    code = "invalid_key"


class InvalidEncodingError(CipherError):
    """Input is not valid padded standard Base64."""

    code = "invalid_encoding"


class InvalidTextError(CipherError):
    """Decrypted bytes are not valid UTF-8."""

    code = "invalid_text"
