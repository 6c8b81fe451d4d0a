from pydantic import BaseModel, Field, ConfigDict
from typing import Optional, List
from datetime import datetime
from enum import Enum

class DemandLevel(str, Enum):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"

class MarketOutlook(str, Enum):
    POSITIVE = "Positive"
    NEUTRAL = "Neutral"
    NEGATIVE = "Negative"

class SalaryRange(BaseModel):
    """
    Pydantic model for the salary band of a single role.
    """
    role: str = Field(..., description="The job title the salary band applies to.")
    min: float = Field(..., allow_inf_nan=False, description="Lower end of the salary band.")
    max: float = Field(..., allow_inf_nan=False, description="Upper end of the salary band.")
    median: float = Field(..., allow_inf_nan=False, description="Median salary for the role.")
    location: Optional[str] = Field(None, description="Region the salary band was observed in.")

class IndustryInsightPayload(BaseModel):
    """
    The generated part of an industry insight, exactly as the model must return it.
    """
    salaryRanges: List[SalaryRange]
    growthRate: float = Field(..., allow_inf_nan=False)
    demandLevel: DemandLevel
    topSkills: List[str]
    marketOutlook: MarketOutlook
    keyTrends: List[str]
    recommendedSkills: List[str]

# --- Response Model ---
class IndustryInsightInDB(BaseModel):
    """
    Pydantic model representing an industry insight as stored in the database.

    This model is used for API responses.
    """
    id: str = Field(..., description="The unique identifier for the insight.")
    industry: str = Field(..., description="The industry the insight describes.")
    salaryRanges: List[SalaryRange] = Field([], description="Salary bands for common roles in the industry.")
    growthRate: float = Field(..., description="Industry growth rate as a percentage.")
    demandLevel: DemandLevel = Field(..., description="Current demand for professionals in the industry.")
    topSkills: List[str] = Field([], description="The most sought-after skills.")
    marketOutlook: MarketOutlook = Field(..., description="Overall market outlook for the industry.")
    keyTrends: List[str] = Field([], description="Trends currently shaping the industry.")
    recommendedSkills: List[str] = Field([], description="Skills worth acquiring.")
    lastUpdated: Optional[datetime] = Field(None, description="When the insight was generated.")
    nextUpdate: datetime = Field(..., description="When the insight is due for regeneration.")

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": "insight_abc123",
                "industry": "tech-software-development",
                "salaryRanges": [
                    {"role": "Software Engineer", "min": 80000, "max": 160000, "median": 120000, "location": "US"}
                ],
                "growthRate": 12.5,
                "demandLevel": "High",
                "topSkills": ["Python", "Cloud", "SQL", "Kubernetes", "TypeScript"],
                "marketOutlook": "Positive",
                "keyTrends": ["Generative AI adoption"],
                "recommendedSkills": ["Machine Learning"],
                "lastUpdated": "2025-01-01T12:00:00",
                "nextUpdate": "2025-01-08T12:00:00"
            }
        }
    )
