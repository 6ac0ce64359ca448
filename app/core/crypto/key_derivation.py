"""
Password -> key derivation.

Two derivations exist:

- sha256 (default): the 32-byte SHA-256 digest of the UTF-8 password
- legacy: single-byte rolling hash over UTF-16 code units,
  ``h = (h * 31 + unit) % 256``; only 256 keys are possible

Neither derivation normalizes the password. Stored ciphertext records
which version produced it; the version is never inferred.
"""
import hashlib
from enum import Enum
from typing import Callable, Dict, List, Union

KEY_SIZE = 32


class KeyVersion(str, Enum):
    SHA256 = "sha256"
    LEGACY = "legacy"


def derive_key(password: str) -> bytes:
    """
    Derive the 32-byte key for a password.

    Any string is accepted, including the empty string.
    """
    return hashlib.sha256(password.encode("utf-8")).digest()


def derive_legacy_key(password: str) -> bytes:
    """
    Derive the 1-byte key used by the original client.

    The original hashed JavaScript char codes, which are UTF-16 code
    units, so astral characters contribute two surrogate units.
    """
    raw = password.encode("utf-16-le", "surrogatepass")
    value = 0
    for i in range(0, len(raw), 2):
        unit = raw[i] | (raw[i + 1] << 8)
        value = (value * 31 + unit) % 256
    return bytes([value])


_DERIVERS: Dict[KeyVersion, Callable[[str], bytes]] = {
    KeyVersion.SHA256: derive_key,
    KeyVersion.LEGACY: derive_legacy_key,
}


def derive_key_for_version(password: str, version: Union[KeyVersion, str]) -> bytes:
    """
    Derive a key with the derivation named by ``version``.

    Raises:
        ValueError: if the version tag is unknown
    """
    return _DERIVERS[KeyVersion(version)](password)


def supported_versions() -> List[str]:
    return [v.value for v in KeyVersion]
