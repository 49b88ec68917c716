from fastapi import APIRouter, Depends, HTTPException, Response
from loguru import logger
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from campuslease.core.auth import (
    MIN_PASSWORD_LENGTH,
    AuthUser,
    clear_auth_cookie,
    get_current_user,
    hash_password,
    issue_user_token,
    verify_password,
)
from campuslease.core.config import USER_COOKIE
from campuslease.core.db import get_db
from campuslease.core.errors import InvalidPayloadError
from campuslease.models.user import LoginEvent, User
from campuslease.schemas.auth import LoginRequest, RegisterRequest, UserOut

router = APIRouter(prefix="/auth", tags=["auth"])


def _auth_user(user: User) -> AuthUser:
    return AuthUser(id=str(user.id), name=user.name, email=user.email)


# ----------------------------
# REGISTER
# ----------------------------
@router.post("/register", response_model=UserOut, status_code=201)
def register(
    payload: RegisterRequest,
    response: Response,
    db: Session = Depends(get_db),
):
    errors = []
    if not payload.name:
        errors.append("name is required")
    if "@" not in payload.email:
        errors.append("email is invalid")
    if len(payload.password) < MIN_PASSWORD_LENGTH:
        errors.append(f"password must be at least {MIN_PASSWORD_LENGTH} characters")
    if errors:
        raise InvalidPayloadError(errors)

    if db.query(User).filter(User.email == payload.email).first():
        raise HTTPException(status_code=400, detail="Email already registered")

    user = User(
        name=payload.name,
        email=payload.email,
        password_hash=hash_password(payload.password),
    )
    db.add(user)
    try:
        db.flush()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=400, detail="Email already registered")

    db.add(LoginEvent(user_id=user.id, email=user.email, event_type="register"))
    db.commit()
    db.refresh(user)

    logger.info(f"[auth] registered user={user.id} email={user.email}")

    auth_user = _auth_user(user)
    issue_user_token(response, auth_user)
    return auth_user


# ----------------------------
# LOGIN / LOGOUT
# ----------------------------
@router.post("/login", response_model=UserOut)
def login(
    payload: LoginRequest,
    response: Response,
    db: Session = Depends(get_db),
):
    user = db.query(User).filter(User.email == payload.email).first()
    if not user or not verify_password(payload.password, user.password_hash):
        logger.info(f"[auth] failed login for {payload.email}")
        raise HTTPException(status_code=401, detail="Invalid email or password")

    db.add(LoginEvent(user_id=user.id, email=user.email, event_type="login"))
    db.commit()

    logger.info(f"[auth] login user={user.id}")

    auth_user = _auth_user(user)
    issue_user_token(response, auth_user)
    return auth_user


@router.post("/logout")
def logout(response: Response):
    clear_auth_cookie(response, USER_COOKIE)
    return {"ok": True}


@router.get("/me", response_model=UserOut)
def me(user: AuthUser = Depends(get_current_user)):
    return user
