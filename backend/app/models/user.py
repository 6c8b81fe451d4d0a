from sqlalchemy import Column, String, Text, Integer, DateTime, JSON, func
from sqlalchemy.orm import relationship

from app.db.session import Base

class User(Base):
    """
    SQLAlchemy model for the 'users' table.

    Accounts are owned by the identity provider; this row mirrors the provider's
    user and carries the career profile collected during onboarding.
    """
    __tablename__ = "users"

    id = Column(String, primary_key=True, index=True)

    # The identity provider's user id (the session token's `sub` claim).
    clerkUserId = Column(String, unique=True, nullable=False, index=True)

    email = Column(String, nullable=True)
    name = Column(String, nullable=True)
    imageUrl = Column(String, nullable=True)

    # Industry classification chosen during onboarding, e.g. "tech-software-development".
    # A user without an industry has not completed onboarding.
    industry = Column(String, nullable=True, index=True)

    # Years of professional experience.
    experience = Column(Integer, nullable=True)
    bio = Column(Text, nullable=True)

    # List of skill names.
    skills = Column(JSON, nullable=False, default=list)

    createdAt = Column(DateTime(timezone=True), server_default=func.now())
    updatedAt = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # --- Relationships ---
    # The insight for the user's industry. Insights are shared between all users
    # of an industry, so the link is a join on the industry value rather than a
    # foreign key owned by the user.
    industryInsight = relationship(
        "IndustryInsight",
        primaryjoin="foreign(User.industry) == IndustryInsight.industry",
        uselist=False,
        viewonly=True,
    )
    resume = relationship("Resume", back_populates="user", uselist=False, cascade="all, delete-orphan")
    assessments = relationship("Assessment", back_populates="user", cascade="all, delete-orphan")
    coverLetters = relationship("CoverLetter", back_populates="user", cascade="all, delete-orphan")
