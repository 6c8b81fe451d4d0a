from pydantic import BaseModel, Field, ConfigDict
from typing import Optional
from datetime import datetime

class CoverLetterCreate(BaseModel):
    jobTitle: str = Field(..., min_length=1)
    companyName: str = Field(..., min_length=1)
    jobDescription: str = Field(..., min_length=1)

class CoverLetterInDB(BaseModel):
    id: str
    userId: str
    content: str
    jobDescription: Optional[str] = None
    companyName: str
    jobTitle: str
    status: str
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
