import hashlib

import pytest

from app.core.crypto.key_derivation import (
    KEY_SIZE,
    KeyVersion,
    derive_key,
    derive_key_for_version,
    derive_legacy_key,
    supported_versions,
)


def _rolling_hash(password):
    h = 0
    for ch in password:
        h = (h * 31 + ord(ch)) % 256
    return h


@pytest.mark.parametrize("password", ["secret", "", " secret ", "비밀번호", "🔐key"])
def test_derive_key_is_sha256_digest(password):
    key = derive_key(password)
    assert len(key) == KEY_SIZE
    assert key == hashlib.sha256(password.encode("utf-8")).digest()


def test_derive_key_is_deterministic():
    assert derive_key("p@ss") == derive_key("p@ss")


def test_derive_key_is_case_and_whitespace_sensitive():
    keys = {derive_key(p) for p in ["secret", "Secret", "secret ", " secret"]}
    assert len(keys) == 4


def test_derive_key_does_not_normalize_unicode():
    # precomposed vs. decomposed e-acute
    assert derive_key("\u00e9") != derive_key("e\u0301")


@pytest.mark.parametrize("password", ["secret", "", "abc", "한글"])
def test_legacy_key_matches_rolling_hash_for_bmp(password):
    assert derive_legacy_key(password) == bytes([_rolling_hash(password)])


def test_legacy_key_hashes_surrogate_pairs():
    # U+1F510 is the surrogate pair D83D DD10 in UTF-16
    expected = ((0xD83D % 256) * 31 + 0xDD10) % 256
    assert derive_legacy_key("\U0001F510") == bytes([expected])


def test_legacy_key_is_one_byte():
    assert len(derive_legacy_key("a much longer password than usual")) == 1


def test_derive_key_for_version_dispatches():
    assert derive_key_for_version("x", KeyVersion.SHA256) == derive_key("x")
    assert derive_key_for_version("x", "legacy") == derive_legacy_key("x")


def test_unknown_version_is_rejected():
    with pytest.raises(ValueError):
        derive_key_for_version("x", "md5")


def test_supported_versions():
    versions = supported_versions()
    assert versions == ["sha256", "legacy"]
    assert all(isinstance(v, str) for v in versions)
