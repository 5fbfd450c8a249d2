"""Tests for password hashing and token generation."""

from nobby.utils.security import (
    DIGEST_BYTES,
    SALT_BYTES,
    TOKEN_BYTES,
    hash_password,
    make_token,
    verify_password,
)

SECRET = "server-secret"


class TestHashPassword:
    """Tests for hash_password."""

    def test_hash_shape(self) -> None:
        """Salt and digest are lowercase hex of the expected lengths."""
        result = hash_password(SECRET, "Nova", "hunter22", iterations=1000)
        assert len(result.salt) == SALT_BYTES * 2
        assert len(result.hash) == DIGEST_BYTES * 2
        assert result.salt == result.salt.lower()
        assert result.iterations == 1000

    def test_fresh_salt_each_time(self) -> None:
        first = hash_password(SECRET, "Nova", "hunter22", iterations=1000)
        second = hash_password(SECRET, "Nova", "hunter22", iterations=1000)
        assert first.salt != second.salt
        assert first.hash != second.hash


class TestVerifyPassword:
    """Tests for verify_password."""

    def test_correct_password(self) -> None:
        stored = hash_password(SECRET, "Nova", "hunter22", iterations=1000)
        assert verify_password(SECRET, "Nova", "hunter22", *stored) is True

    def test_wrong_password(self) -> None:
        stored = hash_password(SECRET, "Nova", "hunter22", iterations=1000)
        assert verify_password(SECRET, "Nova", "hunter23", *stored) is False

    def test_secret_is_part_of_digest(self) -> None:
        """The same password under another server secret does not verify."""
        stored = hash_password(SECRET, "Nova", "hunter22", iterations=1000)
        assert verify_password("other-secret", "Nova", "hunter22", *stored) is False

    def test_username_is_part_of_digest(self) -> None:
        stored = hash_password(SECRET, "Nova", "hunter22", iterations=1000)
        assert verify_password(SECRET, "Orion", "hunter22", *stored) is False

    def test_malformed_stored_hash(self) -> None:
        """A stored hash that is not hex is a mismatch, not an error."""
        stored = hash_password(SECRET, "Nova", "hunter22", iterations=1000)
        assert verify_password(SECRET, "Nova", "hunter22", stored.salt, "zz-not-hex", 1000) is False


def test_make_token() -> None:
    """Tokens are unique lowercase hex strings."""
    tokens = {make_token() for _ in range(50)}
    assert len(tokens) == 50
    for token in tokens:
        assert len(token) == TOKEN_BYTES * 2
        int(token, 16)
