import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.orm import Session

from app.services.cover_letter_service import get_cover_letter_service, CoverLetterService
from app.schemas.cover_letter import CoverLetterCreate, CoverLetterInDB
from app.core.deps import get_current_user_id
from app.db.session import get_db

# Configure logger for this module
logger = logging.getLogger(__name__)

router = APIRouter()

@router.post(
    "/",
    response_model=CoverLetterInDB,
    status_code=status.HTTP_201_CREATED,
    summary="Generate a cover letter",
    description="Writes a cover letter for the given job from the user's profile and stores it."
)
def create_cover_letter(
    *,
    db: Session = Depends(get_db),
    cover_letter_in: CoverLetterCreate,
    clerk_user_id: Optional[str] = Depends(get_current_user_id),
    cover_letter_service: CoverLetterService = Depends(get_cover_letter_service)
):
    logger.debug(f"API: Generating cover letter for {cover_letter_in.jobTitle} at {cover_letter_in.companyName}")
    return cover_letter_service.generate_cover_letter(db=db, clerk_user_id=clerk_user_id, data=cover_letter_in)

@router.get(
    "/",
    response_model=List[CoverLetterInDB],
    summary="List the current user's cover letters"
)
def read_cover_letters(
    *,
    db: Session = Depends(get_db),
    clerk_user_id: Optional[str] = Depends(get_current_user_id),
    cover_letter_service: CoverLetterService = Depends(get_cover_letter_service)
):
    return cover_letter_service.get_cover_letters(db=db, clerk_user_id=clerk_user_id)

@router.get(
    "/{cover_letter_id}",
    response_model=CoverLetterInDB,
    summary="Retrieve a single cover letter by ID",
    description="Returns a 404 error if the cover letter does not exist or belongs to another user."
)
def read_cover_letter(
    *,
    db: Session = Depends(get_db),
    cover_letter_id: str = Path(..., description="The unique identifier of the cover letter."),
    clerk_user_id: Optional[str] = Depends(get_current_user_id),
    cover_letter_service: CoverLetterService = Depends(get_cover_letter_service)
):
    return cover_letter_service.get_cover_letter(db=db, clerk_user_id=clerk_user_id, cover_letter_id=cover_letter_id)

@router.delete(
    "/{cover_letter_id}",
    response_model=CoverLetterInDB,
    summary="Delete a cover letter"
)
def delete_cover_letter(
    *,
    db: Session = Depends(get_db),
    cover_letter_id: str = Path(..., description="The unique identifier of the cover letter."),
    clerk_user_id: Optional[str] = Depends(get_current_user_id),
    cover_letter_service: CoverLetterService = Depends(get_cover_letter_service)
):
    return cover_letter_service.delete_cover_letter(db=db, clerk_user_id=clerk_user_id, cover_letter_id=cover_letter_id)
