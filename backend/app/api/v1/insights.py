import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

# Configure logger for this module
logger = logging.getLogger(__name__)

# Import services, models, and dependencies
from app.services.insights_service import get_insight_service, InsightService
from app.schemas.insight import IndustryInsightInDB
from app.core.deps import get_current_user_id
from app.db.session import get_db

# Create a new router for this module.
router = APIRouter()

@router.get(
    "/",
    response_model=IndustryInsightInDB,
    status_code=status.HTTP_200_OK,
    summary="Retrieve the industry insights for the current user",
    description="Returns the job-market insights for the authenticated user's industry. On first access the insights are generated by the LLM and stored; afterwards the stored insights are returned unchanged."
)
def read_industry_insights(
    *,
    db: Session = Depends(get_db),
    clerk_user_id: Optional[str] = Depends(get_current_user_id),
    insight_service: InsightService = Depends(get_insight_service)
):
    """
    Retrieve (creating on first access) the caller's industry insights.

    Args:
        db (Session): Database session dependency.
        clerk_user_id (Optional[str]): The caller's identity, if any.
        insight_service (InsightService): Dependency for insight operations.

    Raises:
        HTTPException: 401 Unauthorized without a valid session.
        HTTPException: 404 Not Found if the caller has no account.
        HTTPException: 400 Bad Request if the caller has not chosen an industry.
        HTTPException: 500 Internal Server Error if the insights cannot be stored.

    Returns:
        IndustryInsightInDB: The insights for the caller's industry.
    """
    logger.debug(f"API: Received industry insights request for user {clerk_user_id}")
    try:
        return insight_service.get_industry_insights(db=db, clerk_user_id=clerk_user_id)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"API: An unexpected error occurred while retrieving insights: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred while retrieving insights."
        )
