from sqlalchemy import Column, String, Text, Float, ForeignKey, DateTime, JSON, func
from sqlalchemy.orm import relationship

from app.db.session import Base

class Assessment(Base):
    """
    SQLAlchemy model for the 'assessments' table: one scored mock-interview quiz.
    """
    __tablename__ = "assessments"

    id = Column(String, primary_key=True, index=True)
    userId = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    # Percentage of correct answers.
    quizScore = Column(Float, nullable=False)

    # [ { "question", "answer", "userAnswer", "isCorrect", "explanation" } ]
    questions = Column(JSON, nullable=False)

    category = Column(String, nullable=False, default="Technical")
    improvementTip = Column(Text, nullable=True)
    createdAt = Column(DateTime(timezone=True), server_default=func.now())

    user = relationship("User", back_populates="assessments")
