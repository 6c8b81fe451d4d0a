import logging
from typing import Any, Dict, Optional
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

# Import services, models, and dependencies
from app.services.user_service import get_user_service, UserService
from app.services.insights_service import get_insight_service, InsightService
from app.schemas.user import UserInDB, UserProfileUpdate, OnboardingStatus
from app.core.deps import get_current_user_id, require_claims
from app.db.session import get_db

# Configure logger for this module
logger = logging.getLogger(__name__)

router = APIRouter()

@router.post(
    "/me",
    response_model=UserInDB,
    status_code=status.HTTP_200_OK,
    summary="Sync the current user",
    description="Returns the account for the authenticated identity, creating it from the session token on first sign-in."
)
def sync_current_user(
    *,
    db: Session = Depends(get_db),
    claims: Dict[str, Any] = Depends(require_claims),
    user_service: UserService = Depends(get_user_service)
):
    try:
        return user_service.check_user(db=db, claims=claims)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"API: An unexpected error occurred while syncing user: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred while syncing the user."
        )

@router.get(
    "/me/onboarding-status",
    response_model=OnboardingStatus,
    summary="Check whether the current user has completed onboarding"
)
def read_onboarding_status(
    *,
    db: Session = Depends(get_db),
    clerk_user_id: Optional[str] = Depends(get_current_user_id),
    user_service: UserService = Depends(get_user_service)
):
    return OnboardingStatus(isOnboarded=user_service.get_onboarding_status(db=db, clerk_user_id=clerk_user_id))

@router.put(
    "/me/profile",
    response_model=UserInDB,
    summary="Complete onboarding / update the career profile",
    description="Stores industry, experience, bio and skills. Insights for the chosen industry are generated if none exist yet."
)
def update_profile(
    *,
    db: Session = Depends(get_db),
    profile_in: UserProfileUpdate,
    clerk_user_id: Optional[str] = Depends(get_current_user_id),
    user_service: UserService = Depends(get_user_service),
    insight_service: InsightService = Depends(get_insight_service)
):
    """
    Update the caller's profile.

    Raises:
        HTTPException: 401 Unauthorized without a valid session.
        HTTPException: 404 Not Found if the caller has no account.
    """
    logger.debug(f"API: Updating profile of user {clerk_user_id} with industry '{profile_in.industry}'")
    try:
        return user_service.update_profile(
            db=db, clerk_user_id=clerk_user_id, profile=profile_in, insight_service=insight_service
        )
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"API: An unexpected error occurred while updating profile: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred while updating the profile."
        )
