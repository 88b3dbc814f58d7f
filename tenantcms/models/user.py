from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, String
from sqlalchemy.orm import relationship

from tenantcms.database import Base
from tenantcms.models.user_websites import user_websites


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(320), unique=True, nullable=False)
    hashed_password = Column(String, nullable=False)

    # Nullable while the tenancy rollout is in its expand phase
    role = Column(String(20), nullable=True)
    default_website_id = Column(Integer, ForeignKey("websites.id", ondelete="SET NULL"), nullable=True)

    created_at = Column(DateTime, nullable=False, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(
        DateTime,
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    websites = relationship("Website", secondary=user_websites, lazy="selectin", order_by="Website.id")

    __table_args__ = (Index("idx_user_role", "role"),)

    def __repr__(self):
        return f"<User(id={self.id}, email={self.email}, role={self.role})>"
