import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.services.resume_service import get_resume_service, ResumeService
from app.services.user_service import get_user_service, UserService
from app.schemas.resume import ResumeInDB, ResumeSave, ResumeForm, ResumePreview, ImproveRequest, ImproveResponse
from app.core.deps import get_current_user_id
from app.core.markdown import build_resume_markdown
from app.db.session import get_db

# Configure logger for this module
logger = logging.getLogger(__name__)

router = APIRouter()

@router.get(
    "/",
    response_model=ResumeInDB,
    summary="Retrieve the current user's resume",
    description="Returns the stored resume. Returns a 404 error if the user has not saved one yet."
)
def read_resume(
    *,
    db: Session = Depends(get_db),
    clerk_user_id: Optional[str] = Depends(get_current_user_id),
    resume_service: ResumeService = Depends(get_resume_service)
):
    resume = resume_service.get_resume(db=db, clerk_user_id=clerk_user_id)
    if resume is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Resume not found")
    return resume

@router.put(
    "/",
    response_model=ResumeInDB,
    summary="Save the current user's resume",
    description="Creates or replaces the user's resume with the given Markdown content."
)
def save_resume(
    *,
    db: Session = Depends(get_db),
    resume_in: ResumeSave,
    clerk_user_id: Optional[str] = Depends(get_current_user_id),
    resume_service: ResumeService = Depends(get_resume_service)
):
    return resume_service.save_resume(db=db, clerk_user_id=clerk_user_id, content=resume_in.content)

@router.post(
    "/preview",
    response_model=ResumePreview,
    summary="Render the resume builder form as Markdown"
)
def preview_resume(
    *,
    db: Session = Depends(get_db),
    form_in: ResumeForm,
    clerk_user_id: Optional[str] = Depends(get_current_user_id),
    user_service: UserService = Depends(get_user_service)
):
    user = user_service.get_user(db=db, clerk_user_id=clerk_user_id)
    return ResumePreview(content=build_resume_markdown(form_in, user.name))

@router.post(
    "/improve",
    response_model=ImproveResponse,
    summary="Improve an entry description with AI",
    description="Rewrites an experience, education or project description to be more impactful for the user's industry."
)
def improve_description(
    *,
    db: Session = Depends(get_db),
    improve_in: ImproveRequest,
    clerk_user_id: Optional[str] = Depends(get_current_user_id),
    resume_service: ResumeService = Depends(get_resume_service)
):
    logger.debug(f"API: Improving {improve_in.type.value} description for user {clerk_user_id}")
    content = resume_service.improve_with_ai(
        db=db, clerk_user_id=clerk_user_id, current=improve_in.current, content_type=improve_in.type
    )
    return ImproveResponse(content=content)
