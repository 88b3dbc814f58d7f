"""
Media Model

Metadata for uploaded assets. The binary itself lives in external
storage; ``url`` points at it.
"""

from datetime import datetime, timezone

from sqlalchemy import BigInteger, Column, DateTime, ForeignKey, Integer, String

from tenantcms.database import Base


class Media(Base):
    """Media file model"""

    __tablename__ = "media"

    id = Column(Integer, primary_key=True, index=True)
    alt = Column(String, nullable=False)
    filename = Column(String, nullable=True, index=True)
    mime_type = Column(String, nullable=True)
    filesize = Column(BigInteger, nullable=True)  # Size in bytes
    width = Column(Integer, nullable=True)
    height = Column(Integer, nullable=True)
    url = Column(String, nullable=True)
    website_id = Column(Integer, ForeignKey("websites.id", ondelete="SET NULL"), nullable=True, index=True)

    created_at = Column(DateTime, nullable=False, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(
        DateTime,
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    def __repr__(self):
        return f"<Media(id={self.id}, filename={self.filename}, website_id={self.website_id})>"
