"""
Message-level encryption pipeline.

    plaintext -> UTF-8 -> XOR(keystream) -> Base64   (encrypt)
    Base64 -> XOR(keystream) -> UTF-8 -> plaintext   (decrypt)

A successful decrypt only means the XOR output happened to be valid
UTF-8. Many wrong passwords still produce (garbage) text.
"""
from typing import Union

from app.core.crypto.codec import decode_text, encode_text, utf8_decode, utf8_encode
from app.core.crypto.key_derivation import KeyVersion, derive_key_for_version
from app.core.crypto.xor_cipher import transform


def encrypt_message(
    plaintext: str,
    password: str,
    version: Union[KeyVersion, str] = KeyVersion.SHA256,
) -> str:
    """
    Encrypt a message to its Base64 text form.

    Args:
        plaintext: message text
        password: shared secret
        version: key derivation to use

    Returns:
        Padded standard Base64 of the ciphertext
    """
    key = derive_key_for_version(password, version)
    return encode_text(transform(utf8_encode(plaintext), key))


def decrypt_message(
    encoded: str,
    password: str,
    version: Union[KeyVersion, str] = KeyVersion.SHA256,
) -> str:
    """
    Decrypt a Base64 ciphertext back to text.

    Raises:
        InvalidEncodingError: ``encoded`` is not valid padded Base64
        InvalidTextError: the XOR output is not valid UTF-8
    """
    key = derive_key_for_version(password, version)
    return utf8_decode(transform(decode_text(encoded), key))
