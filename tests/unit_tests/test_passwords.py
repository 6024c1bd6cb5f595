"""Unit tests for the credential hasher."""

import pytest
from passlib.exc import MissingBackendError

from auth import passwords
from auth.passwords import hash_password, verify_password
from errors import HashingError


@pytest.mark.parametrize("password", ["Secret-Pass1", "æøå-Ÿ unicode!A", "x", "A" * 60 + "b!"])
def test_verify_accepts_hash_of_same_password(password):
    """Test: verify(p, hash(p)) is true for non-empty passwords."""
    hashed = hash_password(password)

    assert hashed != password
    assert hashed.startswith("$2")
    assert verify_password(password, hashed)


def test_verify_rejects_wrong_password():
    hashed = hash_password("Secret-Pass1")

    assert not verify_password("Secret-Pass2", hashed)
    assert not verify_password("secret-pass1", hashed)


def test_hash_is_salted():
    """Test: Hashing the same password twice yields different hashes."""
    assert hash_password("Secret-Pass1") != hash_password("Secret-Pass1")


def test_verify_returns_false_for_empty_or_malformed_input():
    hashed = hash_password("Secret-Pass1")

    assert not verify_password("", hashed)
    assert not verify_password("Secret-Pass1", "")
    assert not verify_password("Secret-Pass1", "not-a-bcrypt-hash")


def test_hash_raises_hashing_error_when_backend_missing(monkeypatch):
    """Test: An unavailable bcrypt backend surfaces as HashingError."""

    def _missing(*args, **kwargs):
        raise MissingBackendError("bcrypt: no backends available")

    monkeypatch.setattr(passwords.pwd_context, "hash", _missing)

    with pytest.raises(HashingError):
        hash_password("Secret-Pass1")


def test_verify_raises_hashing_error_when_backend_missing(monkeypatch):
    hashed = hash_password("Secret-Pass1")

    def _missing(*args, **kwargs):
        raise MissingBackendError("bcrypt: no backends available")

    monkeypatch.setattr(passwords.pwd_context, "verify", _missing)

    with pytest.raises(HashingError):
        verify_password("Secret-Pass1", hashed)


def test_hash_rejects_nul_byte_without_hashing_error():
    """Test: bcrypt refusing the input is a caller error, not a backend outage."""
    with pytest.raises(ValueError) as exc_info:
        hash_password("Abcdefg!\x00x")

    assert not isinstance(exc_info.value, HashingError)
