from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

# Constantes
_HASH_LEN = 32  # SHA-256
_MAX_OUTPUT = (2**32 - 1) * _HASH_LEN  # RFC 8018, dkLen <= (2^32 - 1) * hLen


def pbkdf2_sha256(password: bytes, salt: bytes, length: int) -> bytes:
    """
    PBKDF2-HMAC-SHA256 con una sola iteración, tal como lo usa scrypt.
    Devuelve exactamente 'length' bytes.
    """
    if length == 0:
        return b""
    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=length,
        salt=memoryview(salt).tobytes(),
        iterations=1,
    )
    return kdf.derive(memoryview(password).tobytes())
