"""Tests for password hashing and verification."""

import pytest

from blog_core.auth.password import PasswordHasher
from blog_core.config import settings
from blog_core.exceptions import HashingError, ValidationError, VerificationError


class TestHash:
    """Tests for PasswordHasher.hash."""

    def test_hash_returns_bcrypt_string(self, hasher):
        """Hash should be a 60 character bcrypt string."""
        hashed = hasher.hash("secret")
        assert isinstance(hashed, str)
        assert len(hashed) == 60
        assert hashed.startswith("$2b$")

    def test_hash_is_not_plaintext(self, hasher):
        assert hasher.hash("secret") != "secret"

    def test_same_password_different_hashes(self, hasher):
        """Same password should produce different hashes (due to salt)."""
        hash1 = hasher.hash("secret")
        hash2 = hasher.hash("secret")
        assert hash1 != hash2
        assert hasher.verify(hash1, "secret") is True
        assert hasher.verify(hash2, "secret") is True

    def test_explicit_work_factor_used(self):
        hashed = PasswordHasher(work_factor=5).hash("secret")
        assert hashed.startswith("$2b$05$")

    def test_default_work_factor_from_settings(self):
        hasher = PasswordHasher()
        assert hasher.work_factor == settings.bcrypt_work_factor

    def test_bcrypt_failure_raises_hashing_error(self, monkeypatch, hasher):
        """Internal bcrypt failure should surface as HashingError without the password."""
        def broken_gensalt(rounds):
            raise OSError("no entropy")

        monkeypatch.setattr("blog_core.auth.password.bcrypt.gensalt", broken_gensalt)

        with pytest.raises(HashingError) as exc_info:
            hasher.hash("topsecret")
        assert "topsecret" not in exc_info.value.message


class TestVerify:
    """Tests for PasswordHasher.verify."""

    @pytest.mark.parametrize("password", ["secret", "SecurePass123", "pässwörd🔒", " spaced "])
    def test_verify_matching_password(self, hasher, password):
        assert hasher.verify(hasher.hash(password), password) is True

    @pytest.mark.parametrize("wrong", ["Secret", "secret ", "", "secre"])
    def test_verify_wrong_password(self, hasher, wrong):
        assert hasher.verify(hasher.hash("secret"), wrong) is False

    def test_verify_malformed_hash_raises(self, hasher):
        with pytest.raises(VerificationError):
            hasher.verify("not-a-bcrypt-hash", "secret")

    def test_verify_empty_hash_raises(self, hasher):
        with pytest.raises(VerificationError):
            hasher.verify("", "secret")


class TestLongPasswords:
    """bcrypt accepts at most 72 bytes of input."""

    def test_72_bytes_round_trips(self, hasher):
        password = "x" * 72
        assert hasher.verify(hasher.hash(password), password) is True

    def test_multibyte_limit_counts_bytes(self, hasher):
        """24 three-byte characters are exactly 72 bytes."""
        password = "€" * 24
        assert hasher.verify(hasher.hash(password), password) is True

    @pytest.mark.parametrize("password", ["x" * 73, "x" * 100, "€" * 25])
    def test_hash_rejects_over_long_password(self, hasher, password):
        with pytest.raises(ValidationError) as exc_info:
            hasher.hash(password)
        assert exc_info.value.message == "invalid Password"
        assert password not in str(exc_info.value.details)

    def test_verify_over_long_password_is_mismatch(self, hasher):
        """A good hash is not reported as malformed because the input is long."""
        hashed = hasher.hash("x" * 72)
        assert hasher.verify(hashed, "x" * 100) is False
        assert hasher.verify(hasher.hash("short"), "z" * 100) is False

    def test_verify_over_long_password_still_checks_hash(self, hasher):
        with pytest.raises(VerificationError):
            hasher.verify("not-a-bcrypt-hash", "z" * 100)

    def test_verify_empty_password_round_trips(self, hasher):
        assert hasher.verify(hasher.hash(""), "") is True
