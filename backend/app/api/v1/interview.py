import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.services.interview_service import get_interview_service, InterviewService
from app.schemas.interview import Quiz, QuizResultCreate, AssessmentInDB
from app.core.deps import get_current_user_id
from app.db.session import get_db

# Configure logger for this module
logger = logging.getLogger(__name__)

router = APIRouter()

@router.post(
    "/quiz",
    response_model=Quiz,
    summary="Generate a mock-interview quiz",
    description="Generates ten technical multiple-choice questions for the user's industry and skills."
)
def generate_quiz(
    *,
    db: Session = Depends(get_db),
    clerk_user_id: Optional[str] = Depends(get_current_user_id),
    interview_service: InterviewService = Depends(get_interview_service)
):
    return Quiz(questions=interview_service.generate_quiz(db=db, clerk_user_id=clerk_user_id))

@router.post(
    "/assessments",
    response_model=AssessmentInDB,
    status_code=status.HTTP_201_CREATED,
    summary="Submit a completed quiz",
    description="Scores the answers, adds an AI improvement tip when some were wrong, and stores the result as an assessment."
)
def submit_quiz_result(
    *,
    db: Session = Depends(get_db),
    result_in: QuizResultCreate,
    clerk_user_id: Optional[str] = Depends(get_current_user_id),
    interview_service: InterviewService = Depends(get_interview_service)
):
    return interview_service.save_quiz_result(
        db=db, clerk_user_id=clerk_user_id, questions=result_in.questions, answers=result_in.answers
    )

@router.get(
    "/assessments",
    response_model=List[AssessmentInDB],
    summary="List the current user's assessments",
    description="Returns all stored assessments, oldest first."
)
def read_assessments(
    *,
    db: Session = Depends(get_db),
    clerk_user_id: Optional[str] = Depends(get_current_user_id),
    interview_service: InterviewService = Depends(get_interview_service)
):
    return interview_service.get_assessments(db=db, clerk_user_id=clerk_user_id)
