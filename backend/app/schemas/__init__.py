# This file re-exports the Pydantic models used as API responses.

from .insight import IndustryInsightInDB as IndustryInsightSchema
from .user import UserInDB as UserSchema
from .resume import ResumeInDB as ResumeSchema
from .interview import AssessmentInDB as AssessmentSchema
from .cover_letter import CoverLetterInDB as CoverLetterSchema
