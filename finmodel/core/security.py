from passlib.context import CryptContext

pwd_context = CryptContext(schemes=["pbkdf2_sha512"], deprecated="auto")


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)
