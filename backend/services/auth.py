# backend/services/auth.py
"""User accounts and the OTP-based password reset flow.

Passwords are stored as passlib hashes. A forgotten password is recovered in
three steps: ``request_password_reset`` issues a short numeric code (logged,
standing in for email delivery), ``verify_otp`` trades the code for a signed
reset token, and ``reset_password`` spends the token. The token is bound to the
email and to the password it was issued against, so it works exactly once.
"""
import hmac
import logging
import secrets
import time
import uuid
from typing import List, Optional

from config import settings
from errors import Conflict, Expired, NotFound, Unauthorized, ValidationError
from storage.base import RecordStore
from utils.hashing import get_password_hash, verify_password
from utils.tokenJWT import create_reset_token, decode_reset_token, password_fingerprint

logger = logging.getLogger(__name__)

PROFILE_FIELDS = ("id", "name", "email", "phone", "addressLine1", "addressLine2", "district", "state", "pincode")
PUBLIC_FIELDS = ("id", "name", "email")


def _now_ms() -> int:
    return int(time.time() * 1000)


def _normalize_email(email: Optional[str]) -> str:
    return (email or "").strip().lower()


def _find_user(users: List[dict], email: str) -> Optional[dict]:
    return next((u for u in users if _normalize_email(u.get("email")) == email), None)


def public_user(user: dict) -> dict:
    return {key: user.get(key) for key in PUBLIC_FIELDS}


def user_profile(user: dict) -> dict:
    return {key: user.get(key) for key in PROFILE_FIELDS}


def generate_otp(length: int = None) -> str:
    length = length or settings.OTP_LENGTH
    low = 10 ** (length - 1)
    return str(low + secrets.randbelow(9 * low))


def sign_up(store: RecordStore, fields: dict) -> dict:
    email = _normalize_email(fields.get("email"))
    if not fields.get("name") or not email or not fields.get("password"):
        raise ValidationError("Name, email, and password are required")

    with store.update("users") as users:
        if _find_user(users, email):
            raise Conflict("User already exists")

        user = {
            "id": f"user-{uuid.uuid4().hex}",
            "name": fields["name"],
            "email": email,
            "phone": fields.get("phone"),
            "addressLine1": fields.get("addressLine1"),
            "addressLine2": fields.get("addressLine2"),
            "district": fields.get("district"),
            "state": fields.get("state"),
            "pincode": fields.get("pincode"),
            "passwordHash": get_password_hash(fields["password"]),
        }
        users.append(user)
    return public_user(user)


def login(store: RecordStore, email, password) -> dict:
    email = _normalize_email(email)
    if not email or not password:
        raise ValidationError("Email and password are required")

    user = _find_user(store.load("users"), email)
    if not user:
        raise Unauthorized("Invalid email or password")

    if "passwordHash" in user:
        if not verify_password(password, user["passwordHash"]):
            raise Unauthorized("Invalid email or password")
        return public_user(user)

    # Accounts created before hashing still hold the plaintext; upgrade on first login
    legacy = user.get("password") or ""
    if not hmac.compare_digest(legacy.encode("utf-8"), password.encode("utf-8")):
        raise Unauthorized("Invalid email or password")
    with store.update("users") as users:
        stored = _find_user(users, email)
        if stored is not None:
            stored["passwordHash"] = get_password_hash(password)
            stored.pop("password", None)
    logger.info("Upgraded stored password for %s to a hash", user.get("id"))
    return public_user(user)


def get_user_info(store: RecordStore, user_id) -> dict:
    if not user_id:
        raise ValidationError("userId is required")
    user = store.find("users", id=user_id)
    if not user:
        raise NotFound("User not found")
    return user_profile(user)


def request_password_reset(store: RecordStore, email) -> str:
    email = _normalize_email(email)
    if not email:
        raise ValidationError("Email is required")
    if not _find_user(store.load("users"), email):
        raise NotFound("Email not found in our system")

    code = generate_otp()
    now = _now_ms()
    with store.update("otps") as otps:
        otps.append({
            "email": email,
            "otp": code,
            "createdAt": now,
            "expiresAt": now + settings.OTP_TTL_MINUTES * 60 * 1000,
        })

    # No mail transport: the log line is the delivery channel
    logger.info("OTP for %s: %s", email, code)
    return email


def verify_otp(store: RecordStore, email, code) -> str:
    email = _normalize_email(email)
    if not email or not code:
        raise ValidationError("Email and OTP are required")
    code = str(code)

    with store.update("otps") as otps:
        record = next((o for o in otps if o.get("email") == email and o.get("otp") == code), None)
        if record is None:
            raise Unauthorized("Invalid OTP")
        # Spent either way: expired codes are dropped too
        otps.remove(record)
        expired = _now_ms() > int(record.get("expiresAt") or 0)

    # Raised after the block so the removal is saved
    if expired:
        raise Expired("OTP has expired")

    user = _find_user(store.load("users"), email)
    return create_reset_token(email, user.get("passwordHash") if user else None)


def reset_password(store: RecordStore, email, token, new_password) -> None:
    email = _normalize_email(email)
    if not email or not token or not new_password:
        raise ValidationError("Email, token, and new password are required")
    if len(new_password) < settings.MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {settings.MIN_PASSWORD_LENGTH} characters")

    claims = decode_reset_token(token, email)

    with store.update("users") as users:
        user = _find_user(users, email)
        if not user:
            raise NotFound("User not found")
        if claims.get("fp") != password_fingerprint(user.get("passwordHash")):
            raise Unauthorized("Reset token has already been used")

        user["passwordHash"] = get_password_hash(new_password)
        user.pop("password", None)
