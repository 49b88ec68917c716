from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from loguru import logger
from sqlalchemy.orm import Session

from campuslease.core.auth import AuthUser, get_current_user
from campuslease.core.db import get_db, get_row
from campuslease.core.errors import InvalidPayloadError, NotFoundError
from campuslease.models.listing import Application, Listing
from campuslease.schemas.application import ApplicationIn, ApplicationOut

router = APIRouter(prefix="/applications", tags=["applications"])


@router.post("", response_model=ApplicationOut, status_code=201)
def apply(
    payload: ApplicationIn,
    db: Session = Depends(get_db),
    user: AuthUser = Depends(get_current_user),
):
    if payload.listing_id <= 0:
        raise InvalidPayloadError(["listingId must be a valid listing id"])

    if not get_row(db, Listing, payload.listing_id):
        raise NotFoundError("Listing not found")

    application = Application(
        listing_id=payload.listing_id,
        name=user.name,
        email=user.email,
        phone=payload.phone,
        message=payload.message,
        applicant_user_id=user.user_id,
    )
    db.add(application)
    db.commit()
    db.refresh(application)

    logger.info(f"[applications] user={user.id} applied to listing={payload.listing_id}")
    return application


@router.get("", response_model=List[ApplicationOut])
def my_applications(
    listing_id: Optional[int] = Query(None, alias="listingId"),
    db: Session = Depends(get_db),
    user: AuthUser = Depends(get_current_user),
):
    query = db.query(Application).filter(Application.applicant_user_id == user.user_id)
    if listing_id:
        query = query.filter(Application.listing_id == listing_id)
    return query.order_by(Application.created_at.desc(), Application.id.desc()).all()
