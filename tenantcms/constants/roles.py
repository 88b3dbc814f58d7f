"""
Role Constants

Defines the fixed set of user roles and their privilege order so the
role names are never hardcoded throughout the codebase.
"""

from enum import Enum


class RoleName(str, Enum):
    """Enumeration of role names in the system."""

    SUPER_ADMIN = "super-admin"
    WEBSITE_ADMIN = "website-admin"
    EDITOR = "editor"
    VIEWER = "viewer"


# Default role for newly created users
DEFAULT_ROLE = RoleName.VIEWER

# Role hierarchy (higher number = more permissions)
ROLE_HIERARCHY = {
    RoleName.VIEWER: 1,
    RoleName.EDITOR: 2,
    RoleName.WEBSITE_ADMIN: 3,
    RoleName.SUPER_ADMIN: 4,
}


def coerce_role(role: str | RoleName | None) -> RoleName | None:
    """Return the RoleName for a stored value, or None for unknown/missing roles."""
    if role is None or role == "":
        return None
    try:
        return RoleName(role)
    except ValueError:
        return None


def is_higher_role(role1: str, role2: str) -> bool:
    """
    Check if role1 has higher privileges than role2.

    Unknown or missing roles rank below every known role.
    """
    hierarchy1 = ROLE_HIERARCHY.get(coerce_role(role1), 0)
    hierarchy2 = ROLE_HIERARCHY.get(coerce_role(role2), 0)
    return hierarchy1 > hierarchy2
