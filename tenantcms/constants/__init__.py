"""Constants package for the tenant CMS."""

from .auth import ACCESS_TOKEN_EXPIRE_MINUTES, ALGORITHM
from .roles import DEFAULT_ROLE, ROLE_HIERARCHY, RoleName, is_higher_role

__all__ = [
    # Role constants
    "RoleName",
    "DEFAULT_ROLE",
    "ROLE_HIERARCHY",
    "is_higher_role",
    # Auth constants
    "ALGORITHM",
    "ACCESS_TOKEN_EXPIRE_MINUTES",
]
