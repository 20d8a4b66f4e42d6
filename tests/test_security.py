import base64

from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from csust_auth.security import (
    AES_CHARS,
    decrypt_cookie_value,
    encrypt_cookie_value,
    encrypt_password,
)

SALT = "rjBFAaHsNkKAhpoi"


def _decrypt(ciphertext: str, salt: str) -> bytes:
    # the IV is never sent; with CBC only the first block depends on it,
    # and that block falls inside the 64 character random prefix
    raw = base64.b64decode(ciphertext)
    decryptor = Cipher(algorithms.AES(salt.encode()), modes.CBC(b"\x00" * 16)).decryptor()
    padded = decryptor.update(raw) + decryptor.finalize()
    unpadder = padding.PKCS7(algorithms.AES.block_size).unpadder()
    return unpadder.update(padded) + unpadder.finalize()


def test_encrypt_password_recoverable_with_salt() -> None:
    plaintext = _decrypt(encrypt_password("p@ss 密码", SALT), SALT)

    assert len(plaintext) == 64 + len("p@ss 密码".encode())
    assert plaintext[64:].decode() == "p@ss 密码"
    assert all(chr(b) in AES_CHARS for b in plaintext[16:64])


def test_encrypt_password_is_randomised() -> None:
    assert encrypt_password("p1", SALT) != encrypt_password("p1", SALT)


def test_encrypt_password_strips_salt() -> None:
    plaintext = _decrypt(encrypt_password("p1", f" {SALT}\n"), SALT)
    assert plaintext[64:] == b"p1"


def test_cookie_value_roundtrip() -> None:
    sealed = encrypt_cookie_value("TGT-1")
    assert sealed != "TGT-1"
    assert decrypt_cookie_value(sealed) == "TGT-1"
