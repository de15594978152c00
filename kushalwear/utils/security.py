# kushalwear/utils/security.py
from datetime import datetime, timedelta, timezone

import jwt
from passlib.context import CryptContext

from kushalwear.domain.errors import AuthError
from kushalwear.utils.settings import JWT_ALGORITHM, JWT_EXPIRES_MINUTES, JWT_SECRET

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    return pwd_context.verify(plain, hashed)


def dummy_verify() -> None:
    # wyrownuje czas odpowiedzi gdy email nie istnieje
    pwd_context.dummy_verify()


def create_access_token(user_id: str, role: str, expires_delta: timedelta | None = None) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "sub": user_id,
        "role": role,
        "iat": now,
        "exp": now + (expires_delta or timedelta(minutes=JWT_EXPIRES_MINUTES)),
    }
    return jwt.encode(payload, JWT_SECRET, algorithm=JWT_ALGORITHM)


def decode_access_token(token: str) -> dict:
    try:
        payload = jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise AuthError("Token expired")
    except jwt.InvalidTokenError:
        raise AuthError("Invalid token")

    if not payload.get("sub"):
        raise AuthError("Invalid token")
    return payload
