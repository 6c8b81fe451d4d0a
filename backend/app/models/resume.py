from sqlalchemy import Column, String, Text, Float, ForeignKey, DateTime, func
from sqlalchemy.orm import relationship

from app.db.session import Base

class Resume(Base):
    """
    SQLAlchemy model for the 'resumes' table. Each user has at most one resume,
    stored as the Markdown produced by the resume builder.
    """
    __tablename__ = "resumes"

    id = Column(String, primary_key=True, index=True)
    userId = Column(String, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)
    content = Column(Text, nullable=False)
    atsScore = Column(Float, nullable=True)
    feedback = Column(Text, nullable=True)
    createdAt = Column(DateTime(timezone=True), server_default=func.now())
    updatedAt = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    user = relationship("User", back_populates="resume")
