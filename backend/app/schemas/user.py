from pydantic import BaseModel, Field, ConfigDict
from typing import Optional, List
from datetime import datetime

class UserProfileUpdate(BaseModel):
    """
    Request body submitted at the end of onboarding.
    """
    industry: str = Field(..., min_length=1, description="The industry the user works in.")
    subIndustry: Optional[str] = Field(None, description="Optional specialization within the industry.")
    experience: Optional[int] = Field(None, ge=0, le=50, description="Years of professional experience.")
    bio: Optional[str] = Field(None, max_length=500, description="Short professional bio.")
    skills: List[str] = Field([], description="The user's skills.")

class OnboardingStatus(BaseModel):
    isOnboarded: bool

class UserInDB(BaseModel):
    id: str
    clerkUserId: str
    email: Optional[str] = None
    name: Optional[str] = None
    imageUrl: Optional[str] = None
    industry: Optional[str] = None
    experience: Optional[int] = None
    bio: Optional[str] = None
    skills: List[str] = []
    createdAt: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
