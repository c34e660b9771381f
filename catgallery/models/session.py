"""Server-side session model definitions."""

from sqlalchemy import JSON, Column, DateTime, String
from catgallery.database import Base


class SessionRecord(Base):
    """Represents one browser session and the user snapshot it carries."""
    __tablename__ = "sessions"

    id = Column(String(64), primary_key=True)
    data = Column(JSON, nullable=False, default=dict)
    expires_at = Column(DateTime, nullable=False, index=True)
