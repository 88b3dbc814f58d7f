import enum
from datetime import datetime, timezone

from sqlalchemy import JSON, Column, DateTime, ForeignKey, Index, Integer, String, Text
from tenantcms.database import Base


class PageStatus(str, enum.Enum):
    DRAFT = "draft"
    PUBLISHED = "published"


class Page(Base):
    __tablename__ = "pages"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    title = Column(String, nullable=False)
    slug = Column(String, nullable=False, index=True)
    website_id = Column(Integer, ForeignKey("websites.id", ondelete="SET NULL"), nullable=True, index=True)
    layout = Column(JSON, nullable=False, default=list)  # ordered list of content blocks
    meta_description = Column(Text, nullable=True)
    published_date = Column(DateTime, nullable=True)
    status = Column(String(20), nullable=False, default=PageStatus.DRAFT.value)
    created_at = Column(DateTime, nullable=False, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(
        DateTime,
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (Index("idx_page_status", "status"),)

    def __repr__(self):
        return f"<Page(id={self.id}, slug={self.slug}, website_id={self.website_id})>"


class PageVersion(Base):
    """Snapshot of a page taken before each update."""

    __tablename__ = "page_versions"

    id = Column(Integer, primary_key=True, index=True)
    page_id = Column(Integer, ForeignKey("pages.id", ondelete="CASCADE"), nullable=False, index=True)
    version = Column(Integer, nullable=False)
    title = Column(String, nullable=False)
    slug = Column(String, nullable=False)
    website_id = Column(Integer, nullable=True)
    layout = Column(JSON, nullable=False, default=list)
    meta_description = Column(Text, nullable=True)
    status = Column(String(20), nullable=False)
    author_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime, nullable=False, default=lambda: datetime.now(timezone.utc))
