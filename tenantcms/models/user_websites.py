from sqlalchemy import Column, ForeignKey, Integer, Table

from tenantcms.database import Base

# Website memberships; removing a user or a website drops the membership rows
user_websites = Table(
    "user_websites",
    Base.metadata,
    Column("user_id", Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("website_id", Integer, ForeignKey("websites.id", ondelete="CASCADE"), primary_key=True, index=True),
)
