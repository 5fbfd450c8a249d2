"""Security utilities for password hashing and bearer tokens."""

import hashlib
import hmac
import secrets
from typing import NamedTuple

# Stored per account, so raising it later does not invalidate existing hashes.
DEFAULT_PASSWORD_ITERATIONS = 120_000

SALT_BYTES = 16
TOKEN_BYTES = 24
DIGEST_BYTES = 32


class PasswordHash(NamedTuple):
    """Stored password parameters for one account."""

    salt: str
    hash: str
    iterations: int


def make_salt() -> str:
    """Generate a random password salt as lowercase hex."""
    return secrets.token_hex(SALT_BYTES)


def make_token() -> str:
    """Generate an opaque session or reset token as lowercase hex."""
    return secrets.token_hex(TOKEN_BYTES)


def _derive_key(secret: str, username: str, password: str, salt: str, iterations: int) -> bytes:
    material = f"{secret}:{username}:{password}".encode()
    return hashlib.pbkdf2_hmac(
        "sha256",
        material,
        salt.encode("utf-8"),
        iterations,
        dklen=DIGEST_BYTES,
    )


def hash_password(
    secret: str,
    username: str,
    password: str,
    iterations: int = DEFAULT_PASSWORD_ITERATIONS,
) -> PasswordHash:
    """Hash a password with a fresh salt.

    The digest is PBKDF2-HMAC-SHA256 over ``secret:username:password``, so a
    leaked table is useless without the server secret.

    Args:
        secret: Server-wide secret mixed into every digest.
        username: Canonical username the password belongs to.
        password: Plain text password.
        iterations: PBKDF2 iteration count to use and store.

    Returns:
        PasswordHash with hex salt, hex digest and the iteration count.
    """
    salt = make_salt()
    digest = _derive_key(secret, username, password, salt, iterations)
    return PasswordHash(salt=salt, hash=digest.hex(), iterations=iterations)


def verify_password(
    secret: str,
    username: str,
    password: str,
    salt: str,
    expected_hash: str,
    iterations: int,
) -> bool:
    """Check a candidate password against stored hash parameters.

    The comparison takes the same time wherever the first differing byte is;
    a malformed stored hash is treated as a mismatch after the full
    derivation has run.
    """
    actual = _derive_key(secret, username, password, salt, iterations)
    try:
        expected = bytes.fromhex(expected_hash)
    except ValueError:
        expected = b""
    return hmac.compare_digest(actual, expected)
