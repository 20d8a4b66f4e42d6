import base64
import secrets
from cryptography.fernet import Fernet
from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from .config import settings

# 确保密钥是字节串
key = settings.ENCRYPTION_KEY.encode()
cipher_suite = Fernet(key)

# 统一认证登录页 encrypt.js 中使用的随机字符集
AES_CHARS = "ABCDEFGHJKMNPQRSTWXYZabcdefhijkmnprstwxyz2345678"

def encrypt_cookie_value(value: str) -> str:
    """加密待落盘的 cookie 值"""
    return cipher_suite.encrypt(value.encode()).decode()

def decrypt_cookie_value(encrypted_value: str) -> str:
    """解密 cookie 值"""
    return cipher_suite.decrypt(encrypted_value.encode()).decode()

def _random_string(length: int) -> str:
    return "".join(secrets.choice(AES_CHARS) for _ in range(length))

def encrypt_password(password: str, salt: str) -> str:
    """
    与登录页同款：AES-CBC(64 位随机串 + 密码, key=pwdEncryptSalt, iv=16 位随机串)，PKCS7 填充，base64 输出
    """
    aes_key = salt.strip().encode("utf-8")
    iv = _random_string(16).encode("utf-8")
    plaintext = (_random_string(64) + password).encode("utf-8")

    padder = padding.PKCS7(algorithms.AES.block_size).padder()
    padded = padder.update(plaintext) + padder.finalize()

    encryptor = Cipher(algorithms.AES(aes_key), modes.CBC(iv)).encryptor()
    encrypted = encryptor.update(padded) + encryptor.finalize()
    return base64.b64encode(encrypted).decode("utf-8")
