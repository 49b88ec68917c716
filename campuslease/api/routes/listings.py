from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request, Response
from sqlalchemy.orm import Session

from campuslease.core.auth import AuthUser, get_current_user
from campuslease.core.db import get_db
from campuslease.schemas.listing import ListingIn, ListingOut, OwnerIn
from campuslease.services.listings import (
    check_owner,
    create_listing,
    delete_listing_cascade,
    get_listing,
    list_listings,
    listing_out,
    update_listing,
)

router = APIRouter(prefix="/listings", tags=["listings"])


def _owned_by(payload: ListingIn, user: AuthUser) -> ListingIn:
    # owner contact comes from the account, only the phone from the form
    owner = OwnerIn(name=user.name, email=user.email, phone=payload.owner.phone)
    return payload.model_copy(update={"owner": owner})


@router.get("", response_model=List[ListingOut])
def listing_index(
    city: Optional[str] = None,
    min_price: Optional[float] = Query(None, alias="minPrice"),
    max_price: Optional[float] = Query(None, alias="maxPrice"),
    bedrooms: Optional[float] = None,
    db: Session = Depends(get_db),
):
    rows = list_listings(
        db,
        city=city,
        min_price=min_price,
        max_price=max_price,
        bedrooms=bedrooms,
    )
    return [listing_out(row) for row in rows]


@router.get("/{listing_id}", response_model=ListingOut)
def listing_detail(listing_id: int, db: Session = Depends(get_db)):
    return listing_out(get_listing(db, listing_id))


@router.post("", response_model=ListingOut, status_code=201)
def listing_create(
    payload: ListingIn,
    request: Request,
    db: Session = Depends(get_db),
    user: AuthUser = Depends(get_current_user),
):
    listing = create_listing(
        db,
        request.app.state.schema,
        _owned_by(payload, user),
        owner_user_id=user.user_id,
    )
    return listing_out(listing)


@router.put("/{listing_id}", response_model=ListingOut)
def listing_update(
    listing_id: int,
    payload: ListingIn,
    request: Request,
    db: Session = Depends(get_db),
    user: AuthUser = Depends(get_current_user),
):
    check_owner(get_listing(db, listing_id), user.user_id, "update")
    listing = update_listing(
        db,
        request.app.state.schema,
        listing_id,
        _owned_by(payload, user),
        owner_user_id=user.user_id,
    )
    return listing_out(listing)


@router.delete("/{listing_id}", status_code=204)
def listing_delete(
    listing_id: int,
    db: Session = Depends(get_db),
    user: AuthUser = Depends(get_current_user),
):
    check_owner(get_listing(db, listing_id), user.user_id, "delete")
    delete_listing_cascade(db, listing_id)
    return Response(status_code=204)
