import hashlib

from passlib.context import CryptContext

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Проверка пароля с использованием bcrypt.

    Args:
        plain_password: Открытый текст пароля
        hashed_password: Хэшированный пароль для сравнения

    Returns:
        bool: True, если пароли совпадают
    """
    if not hashed_password:
        return False
    return pwd_context.verify(plain_password, hashed_password)


def _digest(token: str) -> str:
    # bcrypt only reads the first 72 bytes, a JWT is longer than that
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def hash_token(token: str) -> str:
    return pwd_context.hash(_digest(token))


def verify_token_hash(token: str, hashed_token: str) -> bool:
    if not hashed_token:
        return False
    return pwd_context.verify(_digest(token), hashed_token)
