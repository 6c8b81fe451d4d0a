# Importing every model here registers it on Base.metadata, so create_all and
# the string-based relationships between tables resolve at startup.

from .user import User
from .industry_insight import IndustryInsight
from .resume import Resume
from .assessment import Assessment
from .cover_letter import CoverLetter
