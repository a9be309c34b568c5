import base64
import hashlib

import bcrypt


# bcrypt only accepts 72 bytes; escaped or multibyte passwords can exceed that
def _prehash(password: str) -> bytes:
    return base64.b64encode(hashlib.sha256(password.encode()).digest())


def get_password_hash(password: str) -> str:
    return bcrypt.hashpw(_prehash(password), bcrypt.gensalt()).decode()


def verify_password(plain_password: str, password_hash: str) -> bool:
    return bcrypt.checkpw(_prehash(plain_password), password_hash.encode())
