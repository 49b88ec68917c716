import hashlib
import hmac
import secrets
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from fastapi import Header, HTTPException, Request, Response
from jose import jwt, JWTError
from loguru import logger
from pydantic import BaseModel

from campuslease.core.config import (
    ADMIN_COOKIE,
    ADMIN_EMAIL,
    COOKIE_SAMESITE,
    COOKIE_SECURE,
    JWT_ALGORITHM,
    JWT_EXPIRES_DAYS,
    JWT_SECRET,
    USER_COOKIE,
)


class AuthUser(BaseModel):
    id: str
    name: str
    email: str

    @property
    def user_id(self) -> int:
        return int(self.id)


class AdminUser(BaseModel):
    email: str
    role: str


# ------------------------------------------------------------
# Passwords (scrypt$<salt>$<hex digest>)
# ------------------------------------------------------------
_SCRYPT_N = 16384
_SCRYPT_R = 8
_SCRYPT_P = 1
_SCRYPT_DKLEN = 64

MIN_PASSWORD_LENGTH = 8


def _scrypt(password: str, salt: str) -> bytes:
    return hashlib.scrypt(
        password.encode("utf-8"),
        salt=salt.encode("utf-8"),
        n=_SCRYPT_N,
        r=_SCRYPT_R,
        p=_SCRYPT_P,
        dklen=_SCRYPT_DKLEN,
    )


def hash_password(password: str) -> str:
    salt = secrets.token_hex(16)
    return f"scrypt${salt}${_scrypt(password, salt).hex()}"


def verify_password(password: str, stored: str) -> bool:
    scheme, _, rest = (stored or "").partition("$")
    salt, _, digest = rest.partition("$")
    if scheme != "scrypt" or not salt or not digest:
        return False
    try:
        expected = bytes.fromhex(digest)
    except ValueError:
        return False
    candidate = _scrypt(password, salt)
    if len(candidate) != len(expected):
        return False
    return hmac.compare_digest(candidate, expected)


# ------------------------------------------------------------
# Tokens
# ------------------------------------------------------------
def create_token(claims: Dict[str, Any], expires_days: int = JWT_EXPIRES_DAYS) -> str:
    payload = dict(claims)
    payload["exp"] = datetime.now(timezone.utc) + timedelta(days=expires_days)
    return jwt.encode(payload, JWT_SECRET, algorithm=JWT_ALGORITHM)


def decode_token(token: str) -> Dict[str, Any]:
    try:
        return jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALGORITHM])
    except JWTError:
        raise HTTPException(status_code=401, detail="Unauthorized")


def _get_bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None

    parts = authorization.split(" ", 1)
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise HTTPException(status_code=401, detail="Invalid Authorization header format")

    return parts[1].strip() or None


# ------------------------------------------------------------
# Cookies
# ------------------------------------------------------------
def set_auth_cookie(response: Response, name: str, token: str) -> None:
    response.set_cookie(
        name,
        token,
        path="/",
        httponly=True,
        samesite=COOKIE_SAMESITE,
        secure=COOKIE_SECURE,
        max_age=JWT_EXPIRES_DAYS * 24 * 3600,
    )


def clear_auth_cookie(response: Response, name: str) -> None:
    response.delete_cookie(
        name,
        path="/",
        samesite=COOKIE_SAMESITE,
        secure=COOKIE_SECURE,
    )


def issue_user_token(response: Response, user: AuthUser) -> str:
    token = create_token({"sub": user.id, "name": user.name, "email": user.email})
    set_auth_cookie(response, USER_COOKIE, token)
    return token


# ------------------------------------------------------------
# FastAPI dependencies
# ------------------------------------------------------------
def get_current_user(
    request: Request,
    authorization: Optional[str] = Header(None),
) -> AuthUser:
    """
    Resolve the signed-in student from the session cookie, falling back to
    an ``Authorization: Bearer`` header for non-browser clients.
    """
    token = request.cookies.get(USER_COOKIE) or _get_bearer_token(authorization)
    if not token:
        raise HTTPException(status_code=401, detail="Unauthorized")

    claims = decode_token(token)
    user_id = claims.get("sub")
    if not user_id or not str(user_id).isdigit():
        raise HTTPException(status_code=401, detail="Unauthorized")

    return AuthUser(
        id=str(user_id),
        name=claims.get("name", ""),
        email=claims.get("email", ""),
    )


def get_admin_user(request: Request) -> Optional[AdminUser]:
    token = request.cookies.get(ADMIN_COOKIE)
    if not token:
        return None
    try:
        claims = jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALGORITHM])
    except JWTError:
        return None
    return AdminUser(email=claims.get("email", ""), role=claims.get("role", ""))


def require_admin(request: Request) -> AdminUser:
    admin = get_admin_user(request)
    if not admin:
        raise HTTPException(status_code=401, detail="Unauthorized")
    if admin.role != "admin" or admin.email != ADMIN_EMAIL:
        logger.warning(f"[auth] admin access denied for {admin.email}")
        raise HTTPException(status_code=403, detail="Forbidden")
    return admin
