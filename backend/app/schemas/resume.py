from pydantic import BaseModel, Field, ConfigDict, model_validator
from typing import Optional, List
from datetime import datetime
from enum import Enum

class ContentType(str, Enum):
    EXPERIENCE = "experience"
    EDUCATION = "education"
    PROJECT = "project"

class ContactInfo(BaseModel):
    email: Optional[str] = None
    mobile: Optional[str] = None
    linkedin: Optional[str] = None
    twitter: Optional[str] = None

class ResumeEntry(BaseModel):
    """
    One experience, education or project entry of the resume builder.
    Dates use the `YYYY-MM` format of a month picker.
    """
    title: str = Field(..., min_length=1)
    organization: str = Field(..., min_length=1)
    startDate: str = Field(..., min_length=1)
    endDate: Optional[str] = None
    description: str = Field(..., min_length=1)
    current: bool = False

    @model_validator(mode='after')
    def check_end_date(self) -> 'ResumeEntry':
        if not self.current and not self.endDate:
            raise ValueError("End date is required unless this is your current position")
        return self

class ResumeForm(BaseModel):
    contactInfo: ContactInfo = ContactInfo()
    summary: str = ""
    skills: str = ""
    experience: List[ResumeEntry] = []
    education: List[ResumeEntry] = []
    projects: List[ResumeEntry] = []

class ResumeSave(BaseModel):
    content: str = Field(..., description="The resume as Markdown.")

class ResumePreview(BaseModel):
    content: str

class ImproveRequest(BaseModel):
    current: str = Field(..., min_length=1, description="The description to improve.")
    type: ContentType = Field(..., description="Which kind of entry the description belongs to.")

class ImproveResponse(BaseModel):
    content: str

class ResumeInDB(BaseModel):
    id: str
    userId: str
    content: str
    atsScore: Optional[float] = None
    feedback: Optional[str] = None
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
