from sqlalchemy import Column, String, Text, ForeignKey, DateTime, func
from sqlalchemy.orm import relationship

from app.db.session import Base

class CoverLetter(Base):
    """
    SQLAlchemy model for the 'cover_letters' table.
    """
    __tablename__ = "cover_letters"

    id = Column(String, primary_key=True, index=True)
    userId = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    content = Column(Text, nullable=False)
    jobDescription = Column(Text, nullable=True)
    companyName = Column(String, nullable=False)
    jobTitle = Column(String, nullable=False)

    # "draft" or "completed".
    status = Column(String, nullable=False, default="draft")

    createdAt = Column(DateTime(timezone=True), server_default=func.now())
    updatedAt = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    user = relationship("User", back_populates="coverLetters")
