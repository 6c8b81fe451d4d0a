import uuid
import logging
from typing import Any, Optional

from fastapi import HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.llm import get_llm_manager
from app.core.prompts import IMPROVE_CONTENT_PROMPT
from app.models.resume import Resume as ResumeModel
from app.schemas.resume import ContentType
from app.services.user_service import user_service

# Configure logger for this module
logger = logging.getLogger(__name__)


class ResumeService:
    """
    A service class for the resume builder: storing the user's resume and
    rewriting entry descriptions with the LLM.
    """
    def __init__(self, llm: Optional[Any]):
        self.llm = llm

    def get_resume(self, db: Session, clerk_user_id: Optional[str]) -> Optional[ResumeModel]:
        user = user_service.get_user(db, clerk_user_id)
        return db.query(ResumeModel).filter(ResumeModel.userId == user.id).first()

    def save_resume(self, db: Session, clerk_user_id: Optional[str], content: str) -> ResumeModel:
        """
        Creates or replaces the caller's resume.

        Raises:
            HTTPException: 500 Internal Server Error if the resume cannot be stored.
        """
        user = user_service.get_user(db, clerk_user_id)
        resume = db.query(ResumeModel).filter(ResumeModel.userId == user.id).first()
        if resume:
            resume.content = content
        else:
            resume = ResumeModel(id=f"resume_{uuid.uuid4().hex}", userId=user.id, content=content)
            db.add(resume)
        try:
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"ResumeService: Error saving resume for user {user.id}: {e}", exc_info=True)
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to save resume")
        db.refresh(resume)
        logger.info(f"ResumeService: Saved resume {resume.id} for user {user.id}.")
        return resume

    def improve_with_ai(self, db: Session, clerk_user_id: Optional[str], current: str, content_type: ContentType) -> str:
        """
        Rewrites a resume entry description for the caller's industry.

        Raises:
            HTTPException: 503 Service Unavailable if the LLM is not configured.
            HTTPException: 500 Internal Server Error if the LLM call fails.
        """
        user = user_service.get_user(db, clerk_user_id)
        if self.llm is None:
            raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="LLM service is not available.")

        prompt = IMPROVE_CONTENT_PROMPT.format(
            content_type=content_type.value,
            industry=user.industry or "professional",
            current=current,
        )
        try:
            improved = self.llm.get_response([{"role": "user", "content": prompt}])
        except Exception as e:
            logger.error(f"ResumeService: Error improving content for user {user.id}: {e}", exc_info=True)
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to improve content")
        return improved.strip()


_resume_service: Optional[ResumeService] = None

def get_resume_service() -> ResumeService:
    """
    Dependency function to provide the resume service instance.
    """
    global _resume_service
    if _resume_service is None:
        _resume_service = ResumeService(get_llm_manager())
    return _resume_service
