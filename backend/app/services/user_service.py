import uuid
import logging
from typing import Any, Dict, Optional

from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.models.user import User
from app.schemas.user import UserProfileUpdate

# Configure logger for this module
logger = logging.getLogger(__name__)


def format_industry(industry: str, sub_industry: Optional[str] = None) -> str:
    """
    Combines an industry and an optional specialization into the stored
    classification, e.g. ("tech", "Software Development") -> "tech-software-development".
    """
    if not sub_industry:
        return industry
    return f"{industry}-{'-'.join(sub_industry.lower().split())}"


class UserService:
    """
    A service class containing the business logic for accounts and onboarding.
    """

    def get_user(self, db: Session, clerk_user_id: Optional[str]) -> User:
        """
        Resolves the caller's account.

        Raises:
            HTTPException: 401 Unauthorized if there is no caller identity.
            HTTPException: 404 Not Found if no account exists for the identity.
        """
        if not clerk_user_id:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
        user = db.query(User).filter(User.clerkUserId == clerk_user_id).first()
        if not user:
            logger.warning(f"UserService: User {clerk_user_id} not found.")
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
        return user

    def check_user(self, db: Session, claims: Dict[str, Any]) -> User:
        """
        Returns the account mirroring the identity provider's user, creating it
        from the session token claims on first sign-in.
        """
        clerk_user_id = claims["sub"]
        user = db.query(User).filter(User.clerkUserId == clerk_user_id).first()
        if user:
            return user

        name = claims.get("name") or " ".join(
            part for part in (claims.get("first_name"), claims.get("last_name")) if part
        )
        user = User(
            id=f"user_{uuid.uuid4().hex}",
            clerkUserId=clerk_user_id,
            email=claims.get("email"),
            name=name or None,
            imageUrl=claims.get("image_url"),
            skills=[],
        )
        try:
            db.add(user)
            db.commit()
            db.refresh(user)
        except IntegrityError as e:
            db.rollback()
            # A concurrent first sign-in for the same identity stored the account first.
            existing = db.query(User).filter(User.clerkUserId == clerk_user_id).first()
            if existing:
                logger.info(f"UserService: User for identity {clerk_user_id} was created concurrently; using {existing.id}.")
                return existing
            logger.error(f"UserService: Error creating user for identity {clerk_user_id}: {e}", exc_info=True)
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error creating user")
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"UserService: Error creating user for identity {clerk_user_id}: {e}", exc_info=True)
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error creating user")
        logger.info(f"UserService: Created user {user.id} for identity {clerk_user_id}.")
        return user

    def get_onboarding_status(self, db: Session, clerk_user_id: Optional[str]) -> bool:
        """A user is onboarded once they have chosen an industry."""
        user = self.get_user(db, clerk_user_id)
        return bool(user.industry)

    def update_profile(
        self,
        db: Session,
        clerk_user_id: Optional[str],
        profile: UserProfileUpdate,
        insight_service: Any,
    ) -> User:
        """
        Stores the onboarding profile and makes sure insights exist for the
        chosen industry before the user lands on the dashboard.

        Args:
            db: The SQLAlchemy database session.
            clerk_user_id: The identity provider's id for the caller.
            profile: The submitted onboarding form.
            insight_service: The InsightService used to create missing industry insights.
        """
        user = self.get_user(db, clerk_user_id)
        industry = format_industry(profile.industry, profile.subIndustry)

        insight_service.ensure_industry_insight(db, industry)

        user.industry = industry
        user.experience = profile.experience
        user.bio = profile.bio
        user.skills = list(profile.skills)
        try:
            db.add(user)
            db.commit()
            db.refresh(user)
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"UserService: Error updating profile of user {user.id}: {e}", exc_info=True)
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error updating profile")
        logger.info(f"UserService: Updated profile of user {user.id}; industry '{industry}'.")
        return user

# Create a single instance of the service to be used as a dependency
user_service = UserService()

def get_user_service():
    """
    Dependency function to provide the user service instance.
    """
    return user_service
