"""
Authentication Constants

Configuration constants for JWT bearer tokens.
"""

from tenantcms.config import settings

ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = settings.access_token_expire_minutes
