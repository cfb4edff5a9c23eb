"""Password hashing.

Stored hashes have the form ``<derived key hex>.<salt hex>``: PBKDF2-HMAC-SHA512,
10 000 iterations, 64-byte key. The hex salt string itself is the KDF salt.
"""
import hashlib
import secrets

ITERATIONS = 10000
KEY_LENGTH = 64
SALT_BYTES = 16
SEPARATOR = "."


def _derive(password, salt):
    key = hashlib.pbkdf2_hmac(
        "sha512", password.encode("utf-8"), salt.encode("utf-8"), ITERATIONS, KEY_LENGTH
    )
    return key.hex()


def hash_password(password):
    """Hash a plain-text password with a fresh random salt."""
    salt = secrets.token_hex(SALT_BYTES)
    return _derive(password, salt) + SEPARATOR + salt


def verify_password(password, stored):
    """Return True if ``password`` matches a hash made by :func:`hash_password`."""
    derived, sep, salt = stored.partition(SEPARATOR)
    if not sep or not salt:
        return False
    # Use secrets.compare_digest for secure, timing-attack-resistant comparison
    return secrets.compare_digest(_derive(password, salt), derived)
