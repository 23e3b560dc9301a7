# utils/tokenJWT.py
import hashlib
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import jwt, JWTError

from config import settings
from errors import Unauthorized

RESET_PURPOSE = "password_reset"


def password_fingerprint(password_hash: Optional[str]) -> str:
    # Changes whenever the password does, which retires outstanding reset tokens
    return hashlib.sha256((password_hash or "").encode("utf-8")).hexdigest()[:16]


# Generate a signed password-reset token bound to one email and one password version
def create_reset_token(email: str, password_hash: Optional[str], expires_delta: timedelta = None) -> str:
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=settings.RESET_TOKEN_EXPIRE_MINUTES))
    to_encode = {
        "sub": email,
        "purpose": RESET_PURPOSE,
        "fp": password_fingerprint(password_hash),
        "exp": expire,
    }
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


# Validate a reset token for the given email and return its claims
def decode_reset_token(token: str, email: str) -> dict:
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        raise Unauthorized("Invalid token")

    if payload.get("purpose") != RESET_PURPOSE or payload.get("sub") != email:
        raise Unauthorized("Invalid token")
    return payload
