from sqlalchemy import Column, String, Float, DateTime, JSON, func

from app.db.session import Base

class IndustryInsight(Base):
    """
    SQLAlchemy model for the 'industry_insights' table.

    One row holds the latest AI-generated job-market snapshot for an industry.
    """
    __tablename__ = "industry_insights"

    id = Column(String, primary_key=True, index=True)

    # The industry this snapshot describes. Unique, so concurrent first-time
    # generations for the same industry converge on a single row.
    industry = Column(String, unique=True, nullable=False, index=True)

    # [ { "role": "...", "min": 0, "max": 0, "median": 0, "location": "..." } ]
    salaryRanges = Column(JSON, nullable=False, default=list)

    # Growth rate as a percentage.
    growthRate = Column(Float, nullable=False, default=0)

    # "High", "Medium" or "Low".
    demandLevel = Column(String, nullable=False)

    topSkills = Column(JSON, nullable=False, default=list)

    # "Positive", "Neutral" or "Negative".
    marketOutlook = Column(String, nullable=False)

    keyTrends = Column(JSON, nullable=False, default=list)
    recommendedSkills = Column(JSON, nullable=False, default=list)

    lastUpdated = Column(DateTime(timezone=True), server_default=func.now())

    # Marker for when the snapshot is due for regeneration.
    nextUpdate = Column(DateTime(timezone=True), nullable=False)
