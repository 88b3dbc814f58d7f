"""
Website model: the tenant.

Each Website owns pages and media through their ``website_id`` column and
is shared with users through the ``user_websites`` association table.
Deleting a website nulls the reference on owned content instead of
deleting it.
"""

import enum
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, String

from tenantcms.database import Base


class WebsiteStatus(str, enum.Enum):
    active = "active"
    suspended = "suspended"
    archived = "archived"


class Website(Base):
    __tablename__ = "websites"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False)
    domain = Column(String(253), nullable=False, unique=True, index=True)  # routing domain, e.g. "acme.com"
    slug = Column(String(100), nullable=False, unique=True, index=True)  # URL-safe, e.g. "acme"
    status = Column(String(20), nullable=False, default=WebsiteStatus.active.value)

    # Cosmetic settings group; not consulted by access control
    settings_logo_id = Column(
        Integer,
        ForeignKey("media.id", ondelete="SET NULL", use_alter=True, name="fk_websites_settings_logo_id"),
        nullable=True,
    )
    settings_primary_color = Column(String(20), nullable=True)
    settings_secondary_color = Column(String(20), nullable=True)
    settings_analytics_id = Column(String(100), nullable=True)

    created_at = Column(DateTime, nullable=False, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(
        DateTime,
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (Index("idx_website_status", "status"),)

    def __repr__(self):
        return f"<Website(id={self.id}, slug={self.slug}, domain={self.domain})>"
