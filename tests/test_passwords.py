import hashlib

from mindsync.passwords import hash_password, verify_password, ITERATIONS, KEY_LENGTH


def test_hash_verifies_original_password():
    stored = hash_password("correct horse")
    assert verify_password("correct horse", stored)


def test_hash_rejects_other_passwords():
    stored = hash_password("correct horse")
    assert not verify_password("correct horse ", stored)
    assert not verify_password("", stored)


def test_hash_format_is_key_dot_salt():
    stored = hash_password("secret")
    key, salt = stored.split(".")
    assert len(key) == KEY_LENGTH * 2
    assert len(salt) == 32
    int(key, 16)
    int(salt, 16)


def test_hashes_are_salted():
    assert hash_password("same") != hash_password("same")


def test_verifies_hash_made_elsewhere_with_same_scheme():
    """A hash built by hand with the documented parameters must verify."""
    salt = "00112233445566778899aabbccddeeff"
    key = hashlib.pbkdf2_hmac("sha512", b"pw", salt.encode("utf-8"), ITERATIONS, KEY_LENGTH).hex()
    assert verify_password("pw", f"{key}.{salt}")


def test_malformed_hash_never_verifies():
    assert not verify_password("pw", "no-separator-here")
    assert not verify_password("pw", "abc.")
