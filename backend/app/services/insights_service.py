import math
import uuid
import logging
from typing import Optional, Dict, Any
from datetime import datetime, timedelta, timezone

from fastapi import HTTPException, status
from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from app.core.config import settings
from app.core.llm import get_llm_manager, parse_json, strip_code_fences
from app.core.prompts import INDUSTRY_INSIGHTS_PROMPT
from app.models.user import User
from app.models.industry_insight import IndustryInsight as IndustryInsightModel
from app.schemas.insight import DemandLevel, MarketOutlook, IndustryInsightPayload

# Configure logger for this module
logger = logging.getLogger(__name__)

INSIGHT_STRING_LIST_FIELDS = ("topSkills", "keyTrends", "recommendedSkills")
INSIGHT_LIST_FIELDS = ("salaryRanges",) + INSIGHT_STRING_LIST_FIELDS
INSIGHT_FIELDS = INSIGHT_LIST_FIELDS + ("growthRate", "demandLevel", "marketOutlook")


def default_insights() -> Dict[str, Any]:
    """
    The neutral placeholder returned whenever insights cannot be generated.
    A fresh dict is built on every call so callers may mutate it.
    """
    return {
        "salaryRanges": [],
        "growthRate": 0,
        "demandLevel": DemandLevel.MEDIUM.value,
        "topSkills": [],
        "marketOutlook": MarketOutlook.NEUTRAL.value,
        "keyTrends": [],
        "recommendedSkills": [],
    }


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def validate_insights(insights: Any) -> Optional[str]:
    """
    Checks the shape of a parsed model reply.

    Returns:
        None when the payload is usable, otherwise a description of the first problem found.
    """
    if not isinstance(insights, dict):
        return "top-level value is not an object"
    if not _is_number(insights.get("growthRate")):
        return "growthRate is not a number"
    for field in INSIGHT_LIST_FIELDS:
        if not isinstance(insights.get(field), list):
            return f"{field} is missing or not a list"
    for salary_range in insights["salaryRanges"]:
        if not isinstance(salary_range, dict) or not isinstance(salary_range.get("role"), str):
            return "salary range without a string role"
        if not all(_is_number(salary_range.get(key)) for key in ("min", "max", "median")):
            return f"salary range for '{salary_range['role']}' has non-numeric min/max/median"
        if salary_range.get("location") is not None and not isinstance(salary_range["location"], str):
            return f"salary range for '{salary_range['role']}' has a non-string location"
    for field in INSIGHT_STRING_LIST_FIELDS:
        if not all(isinstance(item, str) for item in insights[field]):
            return f"{field} contains a non-string item"
    if insights.get("demandLevel") not in {level.value for level in DemandLevel}:
        return f"demandLevel {insights.get('demandLevel')!r} is not one of High/Medium/Low"
    if insights.get("marketOutlook") not in {outlook.value for outlook in MarketOutlook}:
        return f"marketOutlook {insights.get('marketOutlook')!r} is not one of Positive/Neutral/Negative"

    # Whatever is stored must also serialize through the API response model.
    try:
        IndustryInsightPayload.model_validate(insights)
    except ValidationError as e:
        return f"payload does not match the insight schema: {e.errors()[0]['msg']}"
    return None


class InsightGenerator:
    """
    Turns an industry label into a structured job-market snapshot via the LLM.

    `generate` never raises: any failure along the way (provider call, JSON
    parsing, shape validation) is logged and answered with `default_insights()`.
    """

    def __init__(self, llm: Optional[Any]):
        # Any object with a `get_response(messages) -> str` method.
        self.llm = llm

    def build_prompt(self, industry: str) -> str:
        return INDUSTRY_INSIGHTS_PROMPT.format(industry=industry)

    def generate(self, industry: str) -> Dict[str, Any]:
        if self.llm is None:
            logger.error(f"InsightGenerator: LLM service is not available; using default insights for '{industry}'.")
            return default_insights()

        logger.info(f"InsightGenerator: Generating insights for industry '{industry}'.")
        try:
            text = self.llm.get_response([{"role": "user", "content": self.build_prompt(industry)}])
            cleaned_text = strip_code_fences(text)
        except Exception as e:
            logger.error(f"InsightGenerator: LLM call failed for industry '{industry}': {e}", exc_info=True)
            return default_insights()

        try:
            insights = parse_json(cleaned_text)
        except ValueError as e:
            logger.error(f"InsightGenerator: JSON parse error: {e}. Text: {cleaned_text}")
            return default_insights()

        problem = validate_insights(insights)
        if problem:
            logger.error(f"InsightGenerator: Invalid insights format ({problem}): {insights}")
            return default_insights()

        logger.debug(f"InsightGenerator: Insights for '{industry}' passed validation.")
        return {field: insights[field] for field in INSIGHT_FIELDS}


class InsightService:
    """
    A service class mediating between the caller's identity, the stored
    industry insights and the InsightGenerator.
    """
    def __init__(self, generator: InsightGenerator, refresh_days: int = 7):
        self.generator = generator
        self.refresh_days = refresh_days

    def get_industry_insights(self, db: Session, clerk_user_id: Optional[str]) -> IndustryInsightModel:
        """
        Returns the insights for the calling user's industry, generating and
        storing them on first access.

        Args:
            db (Session): The SQLAlchemy database session.
            clerk_user_id (Optional[str]): The identity provider's id for the caller.

        Raises:
            HTTPException: 401 Unauthorized if there is no caller identity.
            HTTPException: 404 Not Found if the caller has no account.
            HTTPException: 400 Bad Request if the caller has not chosen an industry.
            HTTPException: 500 Internal Server Error if the new insight cannot be stored.
        """
        if not clerk_user_id:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")

        user = (
            db.query(User)
            .options(joinedload(User.industryInsight))
            .filter(User.clerkUserId == clerk_user_id)
            .first()
        )
        if not user:
            logger.warning(f"InsightService: User {clerk_user_id} not found.")
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

        if user.industryInsight:
            logger.debug(f"InsightService: Returning stored insight {user.industryInsight.id} for user {clerk_user_id}.")
            return user.industryInsight

        if not user.industry:
            logger.warning(f"InsightService: User {clerk_user_id} has no industry; onboarding incomplete.")
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Complete onboarding to choose an industry first")

        return self._create_industry_insight(db, user.industry)

    def ensure_industry_insight(self, db: Session, industry: str) -> IndustryInsightModel:
        """
        Returns the stored insight for an industry, creating it if none exists yet.
        """
        existing = db.query(IndustryInsightModel).filter(IndustryInsightModel.industry == industry).first()
        if existing:
            return existing
        return self._create_industry_insight(db, industry)

    def _create_industry_insight(self, db: Session, industry: str) -> IndustryInsightModel:
        insights = self.generator.generate(industry)
        now = datetime.now(timezone.utc)
        db_insight = IndustryInsightModel(
            id=f"insight_{uuid.uuid4().hex}",
            industry=industry,
            **insights,
            lastUpdated=now,
            nextUpdate=now + timedelta(days=self.refresh_days),
        )
        try:
            db.add(db_insight)
            db.commit()
            db.refresh(db_insight)
        except IntegrityError as e:
            db.rollback()
            # A concurrent request stored this industry first; its row wins.
            existing = db.query(IndustryInsightModel).filter(IndustryInsightModel.industry == industry).first()
            if existing:
                logger.info(f"InsightService: Insight for '{industry}' was created concurrently; using {existing.id}.")
                return existing
            logger.error(f"InsightService: Error creating insight for '{industry}': {e}", exc_info=True)
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error creating insights")
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"InsightService: Error creating insight for '{industry}': {e}", exc_info=True)
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error creating insights")

        logger.info(f"InsightService: Created insight {db_insight.id} for '{industry}', next update {db_insight.nextUpdate}.")
        return db_insight


_insight_service: Optional[InsightService] = None

def get_insight_service() -> InsightService:
    """
    Dependency function to provide the insight service instance.
    """
    global _insight_service
    if _insight_service is None:
        _insight_service = InsightService(
            InsightGenerator(get_llm_manager()),
            refresh_days=settings.INSIGHTS_REFRESH_DAYS,
        )
    return _insight_service

# Explicitly expose the classes for direct import
__all__ = ["InsightGenerator", "InsightService", "default_insights", "get_insight_service"]
