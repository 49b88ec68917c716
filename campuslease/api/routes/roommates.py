from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from loguru import logger
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from campuslease.core.auth import AuthUser, get_current_user
from campuslease.core.db import get_db
from campuslease.core.errors import NotFoundError
from campuslease.models.roommate import RoommateProfile
from campuslease.schemas.enums import PetPreference, Smoking
from campuslease.schemas.roommate import RoommateProfileIn, RoommateProfileOut
from campuslease.services.roommates import RoommateFilters, rank_profiles, score_profile

router = APIRouter(prefix="/roommates", tags=["roommates"])


def _own_profile(db: Session, user: AuthUser) -> Optional[RoommateProfile]:
    return (
        db.query(RoommateProfile)
        .filter(RoommateProfile.user_id == user.user_id)
        .first()
    )


def _fill(profile: RoommateProfile, payload: RoommateProfileIn) -> RoommateProfile:
    # full replace: every field comes from the payload
    for field, value in payload.model_dump(mode="json").items():
        setattr(profile, field, value)
    return profile


def _profile_out(profile: RoommateProfile, score: Optional[int] = None) -> RoommateProfileOut:
    out = RoommateProfileOut.model_validate(profile)
    out.compatibility_score = score
    return out


# ----------------------------
# OWN PROFILE
# ----------------------------
@router.get("/me", response_model=RoommateProfileOut, response_model_exclude_none=True)
def get_my_profile(
    db: Session = Depends(get_db),
    user: AuthUser = Depends(get_current_user),
):
    profile = _own_profile(db, user)
    if not profile:
        raise NotFoundError("Roommate profile not found")
    return _profile_out(profile)


@router.put("/me", response_model=RoommateProfileOut, response_model_exclude_none=True)
def save_my_profile(
    payload: RoommateProfileIn,
    db: Session = Depends(get_db),
    user: AuthUser = Depends(get_current_user),
):
    profile = _own_profile(db, user)
    if profile is None:
        profile = _fill(RoommateProfile(user_id=user.user_id), payload)
        db.add(profile)
        try:
            db.commit()
        except IntegrityError:
            # a concurrent first save won the insert, update that row instead
            db.rollback()
            profile = _fill(_own_profile(db, user), payload)
            db.commit()
    else:
        _fill(profile, payload)
        db.commit()

    db.refresh(profile)

    logger.info(f"[roommates] saved profile {profile.id} for user={user.id}")
    return _profile_out(profile)


# ----------------------------
# SEARCH
# ----------------------------
@router.get("", response_model=List[RoommateProfileOut], response_model_exclude_none=True)
def search_roommates(
    min_score: int = Query(0, alias="minScore", ge=0, le=100),
    gender: Optional[str] = None,
    university: Optional[str] = None,
    max_budget: Optional[int] = Query(None, alias="maxBudget", ge=0),
    pets: Optional[PetPreference] = None,
    smoking: Optional[Smoking] = None,
    db: Session = Depends(get_db),
    user: AuthUser = Depends(get_current_user),
):
    current = _own_profile(db, user)
    candidates = (
        db.query(RoommateProfile)
        .filter(RoommateProfile.user_id != user.user_id)
        .order_by(RoommateProfile.created_at.asc())
        .all()
    )

    filters = RoommateFilters(
        min_score=min_score,
        gender=gender or None,
        university=(university or "").strip() or None,
        max_budget=max_budget,
        pets=pets.value if pets else None,
        smoking=smoking.value if smoking else None,
    )
    ranked = rank_profiles(current, candidates, filters)
    return [_profile_out(profile, score) for profile, score in ranked]


@router.get("/{profile_id}", response_model=RoommateProfileOut, response_model_exclude_none=True)
def get_roommate(
    profile_id: str,
    db: Session = Depends(get_db),
    user: AuthUser = Depends(get_current_user),
):
    profile = db.get(RoommateProfile, profile_id)
    if not profile:
        raise NotFoundError("Roommate profile not found")
    return _profile_out(profile, score_profile(_own_profile(db, user), profile))
