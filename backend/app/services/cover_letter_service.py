import uuid
import logging
from typing import Any, List, Optional
from datetime import datetime, timezone

from fastapi import HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.llm import get_llm_manager
from app.core.prompts import COVER_LETTER_PROMPT
from app.models.cover_letter import CoverLetter as CoverLetterModel
from app.schemas.cover_letter import CoverLetterCreate, CoverLetterInDB
from app.services.user_service import user_service

# Configure logger for this module
logger = logging.getLogger(__name__)


class CoverLetterService:
    """
    A service class for generating and managing the caller's cover letters.
    """
    def __init__(self, llm: Optional[Any]):
        self.llm = llm

    def generate_cover_letter(self, db: Session, clerk_user_id: Optional[str], data: CoverLetterCreate) -> CoverLetterModel:
        """
        Writes a cover letter for a job posting from the caller's profile and stores it.

        Raises:
            HTTPException: 503 Service Unavailable if the LLM is not configured.
            HTTPException: 500 Internal Server Error if generation or storage fails.
        """
        user = user_service.get_user(db, clerk_user_id)
        if self.llm is None:
            raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="LLM service is not available.")

        prompt = COVER_LETTER_PROMPT.format(
            job_title=data.jobTitle,
            company_name=data.companyName,
            industry=user.industry or "not specified",
            experience=user.experience if user.experience is not None else "not specified",
            skills=", ".join(user.skills) if user.skills else "not specified",
            bio=user.bio or "not specified",
            job_description=data.jobDescription,
        )
        try:
            content = self.llm.get_response([{"role": "user", "content": prompt}]).strip()
        except Exception as e:
            logger.error(f"CoverLetterService: Error generating cover letter for user {user.id}: {e}", exc_info=True)
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to generate cover letter")

        cover_letter = CoverLetterModel(
            id=f"coverletter_{uuid.uuid4().hex}",
            userId=user.id,
            content=content,
            jobDescription=data.jobDescription,
            companyName=data.companyName,
            jobTitle=data.jobTitle,
            status="completed",
            createdAt=datetime.now(timezone.utc),
        )
        try:
            db.add(cover_letter)
            db.commit()
            db.refresh(cover_letter)
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"CoverLetterService: Error saving cover letter for user {user.id}: {e}", exc_info=True)
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to save cover letter")

        logger.info(f"CoverLetterService: Created cover letter {cover_letter.id} for user {user.id}.")
        return cover_letter

    def get_cover_letters(self, db: Session, clerk_user_id: Optional[str]) -> List[CoverLetterModel]:
        """The caller's cover letters, newest first."""
        user = user_service.get_user(db, clerk_user_id)
        return (
            db.query(CoverLetterModel)
            .filter(CoverLetterModel.userId == user.id)
            .order_by(CoverLetterModel.createdAt.desc())
            .all()
        )

    def get_cover_letter(self, db: Session, clerk_user_id: Optional[str], cover_letter_id: str) -> CoverLetterModel:
        """
        Raises:
            HTTPException: 404 Not Found if the letter does not exist or belongs to someone else.
        """
        user = user_service.get_user(db, clerk_user_id)
        cover_letter = (
            db.query(CoverLetterModel)
            .filter(CoverLetterModel.id == cover_letter_id, CoverLetterModel.userId == user.id)
            .first()
        )
        if not cover_letter:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Cover letter not found")
        return cover_letter

    def delete_cover_letter(self, db: Session, clerk_user_id: Optional[str], cover_letter_id: str) -> CoverLetterInDB:
        """
        Deletes one of the caller's cover letters and returns a snapshot of it.
        """
        cover_letter = self.get_cover_letter(db, clerk_user_id, cover_letter_id)
        # Build the snapshot before the row is deleted and its attributes expire.
        snapshot = CoverLetterInDB.model_validate(cover_letter, from_attributes=True)
        try:
            db.delete(cover_letter)
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"CoverLetterService: Error deleting cover letter {cover_letter_id}: {e}", exc_info=True)
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to delete cover letter")
        logger.info(f"CoverLetterService: Deleted cover letter {cover_letter_id}.")
        return snapshot


_cover_letter_service: Optional[CoverLetterService] = None

def get_cover_letter_service() -> CoverLetterService:
    """
    Dependency function to provide the cover letter service instance.
    """
    global _cover_letter_service
    if _cover_letter_service is None:
        _cover_letter_service = CoverLetterService(get_llm_manager())
    return _cover_letter_service
