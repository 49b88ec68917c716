from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from fastapi.responses import JSONResponse
from loguru import logger
from pydantic import ValidationError
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from campuslease.core.auth import (
    MIN_PASSWORD_LENGTH,
    AdminUser,
    clear_auth_cookie,
    create_token,
    hash_password,
    require_admin,
    set_auth_cookie,
)
from campuslease.core.config import ADMIN_COOKIE, ADMIN_EMAIL, ADMIN_PASSWORD
from campuslease.core.db import get_db, get_row
from campuslease.core.errors import InvalidPayloadError, NotFoundError
from campuslease.models.listing import Application, Listing
from campuslease.models.user import LoginEvent, User
from campuslease.modules.messaging.models import Message, Thread
from campuslease.modules.messaging.routes import threads_with_messages
from campuslease.modules.messaging.service import list_threads
from campuslease.schemas.application import AdminApplicationOut
from campuslease.schemas.auth import (
    AdminLoginRequest,
    AdminOut,
    AdminUserOut,
    AdminUserUpdate,
    LoginEventOut,
    StatsOut,
)
from campuslease.schemas.listing import ListingIn, ListingOut
from campuslease.schemas.thread import ThreadOut
from campuslease.services.listings import (
    delete_listing_cascade,
    get_listing,
    list_listings,
    listing_out,
    update_listing,
)

router = APIRouter(prefix="/admin", tags=["admin"])

LOGIN_EVENTS_LIMIT = 100


def _merge_nested(base: dict, body: dict, key: str) -> dict:
    value = body.get(key)
    if value is None:
        return base[key]
    if not isinstance(value, dict):
        raise InvalidPayloadError([f"{key} must be an object"])
    return {**base[key], **value}


# ----------------------------
# SESSION
# ----------------------------
@router.post("/login", response_model=AdminOut)
def admin_login(payload: AdminLoginRequest, response: Response):
    email = (payload.email or "").strip()
    if not email or not payload.password:
        raise HTTPException(status_code=400, detail="Email and password are required")

    if email != ADMIN_EMAIL or payload.password != ADMIN_PASSWORD:
        logger.warning(f"[admin] failed login for {email}")
        rejected = JSONResponse(status_code=401, content={"detail": "Invalid admin credentials"})
        clear_auth_cookie(rejected, ADMIN_COOKIE)
        return rejected

    admin = AdminOut(email=ADMIN_EMAIL, role="admin")
    set_auth_cookie(response, ADMIN_COOKIE, create_token(admin.model_dump()))
    logger.info("[admin] login")
    return admin


@router.post("/logout")
def admin_logout(response: Response):
    clear_auth_cookie(response, ADMIN_COOKIE)
    return {"ok": True}


@router.get("/me", response_model=AdminOut)
def admin_me(admin: AdminUser = Depends(require_admin)):
    return admin


# ----------------------------
# OVERVIEW
# ----------------------------
@router.get("/stats", response_model=StatsOut, dependencies=[Depends(require_admin)])
def admin_stats(db: Session = Depends(get_db)):
    def count(model):
        return db.query(func.count(model.id)).scalar()

    return StatsOut(
        users=count(User),
        listings=count(Listing),
        applications=count(Application),
        threads=count(Thread),
        messages=count(Message),
    )


@router.get("/users", response_model=List[AdminUserOut], dependencies=[Depends(require_admin)])
def admin_users(db: Session = Depends(get_db)):
    return db.query(User).order_by(User.created_at.desc(), User.id.desc()).all()


@router.get("/listings", response_model=List[ListingOut], dependencies=[Depends(require_admin)])
def admin_listings(db: Session = Depends(get_db)):
    return [listing_out(row) for row in list_listings(db)]


@router.get(
    "/applications",
    response_model=List[AdminApplicationOut],
    dependencies=[Depends(require_admin)],
)
def admin_applications(db: Session = Depends(get_db)):
    rows = (
        db.query(Application, Listing.title)
        .outerjoin(Listing, Listing.id == Application.listing_id)
        .order_by(Application.created_at.desc(), Application.id.desc())
        .all()
    )
    out = []
    for application, title in rows:
        item = AdminApplicationOut.model_validate(application)
        item.listing_title = title
        out.append(item)
    return out


@router.get("/threads", response_model=List[ThreadOut], dependencies=[Depends(require_admin)])
def admin_threads(db: Session = Depends(get_db)):
    return threads_with_messages(db, list_threads(db))


@router.get(
    "/login-events",
    response_model=List[LoginEventOut],
    dependencies=[Depends(require_admin)],
)
def admin_login_events(db: Session = Depends(get_db)):
    return (
        db.query(LoginEvent)
        .order_by(LoginEvent.created_at.desc(), LoginEvent.id.desc())
        .limit(LOGIN_EVENTS_LIMIT)
        .all()
    )


# ----------------------------
# MODERATION
# ----------------------------
@router.put(
    "/listings/{listing_id}",
    response_model=ListingOut,
    dependencies=[Depends(require_admin)],
)
def admin_update_listing(
    listing_id: int,
    body: dict,
    request: Request,
    db: Session = Depends(get_db),
):
    existing = get_listing(db, listing_id)
    base = listing_out(existing).model_dump(by_alias=True)

    # shallow merge, with owner and coordinates merged one level down
    merged = {
        **base,
        **body,
        "owner": _merge_nested(base, body, "owner"),
        "coordinates": _merge_nested(base, body, "coordinates"),
    }
    try:
        payload = ListingIn.model_validate(merged)
    except ValidationError as e:
        raise InvalidPayloadError([err["msg"] for err in e.errors()])

    listing = update_listing(
        db,
        request.app.state.schema,
        listing_id,
        payload,
        owner_user_id=existing.owner_user_id,
    )
    logger.info(f"[admin] updated listing {listing_id}")
    return listing_out(listing)


@router.delete("/listings/{listing_id}", status_code=204, dependencies=[Depends(require_admin)])
def admin_delete_listing(listing_id: int, db: Session = Depends(get_db)):
    delete_listing_cascade(db, listing_id)
    logger.info(f"[admin] deleted listing {listing_id}")
    return Response(status_code=204)


@router.put("/users/{user_id}", response_model=AdminUserOut, dependencies=[Depends(require_admin)])
def admin_update_user(
    user_id: int,
    payload: AdminUserUpdate,
    db: Session = Depends(get_db),
):
    user = get_row(db, User, user_id)
    if not user:
        raise NotFoundError("User not found")

    name = payload.name.strip() if payload.name is not None else user.name
    email = payload.email.strip().lower() if payload.email is not None else user.email

    if not name:
        raise HTTPException(status_code=400, detail="Name is required")
    if "@" not in email:
        raise HTTPException(status_code=400, detail="Email is invalid")
    if payload.password and len(payload.password) < MIN_PASSWORD_LENGTH:
        raise HTTPException(
            status_code=400,
            detail=f"Password must be at least {MIN_PASSWORD_LENGTH} characters",
        )

    user.name = name
    user.email = email
    if payload.password:
        user.password_hash = hash_password(payload.password)

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=400, detail="Email already registered")

    db.refresh(user)
    logger.info(f"[admin] updated user {user_id}")
    return user
