from dataclasses import dataclass, field
from typing import Any

from tenantcms.access.references import WebsiteId, extract_website_ids, to_website_id
from tenantcms.constants.roles import RoleName, coerce_role


@dataclass(frozen=True)
class Principal:
    """
    The acting user as seen by the access rules.

    Built fresh for every operation from the authenticated user so that
    membership changes take effect on the next request.
    """

    id: Any
    role: RoleName | None = None
    website_ids: frozenset[WebsiteId] = field(default_factory=frozenset)
    default_website_id: WebsiteId | None = None

    @classmethod
    def from_user(cls, user: Any) -> "Principal | None":
        """Normalize an ORM user, a mapping or an existing principal."""
        if user is None or isinstance(user, Principal):
            return user

        if isinstance(user, dict):
            get = user.get
        else:
            def get(name, default=None):
                return getattr(user, name, default)

        default_website = get("default_website_id")
        if default_website is None:
            default_website = get("default_website")

        return cls(
            id=get("id"),
            role=coerce_role(get("role")),
            website_ids=frozenset(extract_website_ids(get("websites"))),
            default_website_id=to_website_id(default_website),
        )

    @property
    def is_super_admin(self) -> bool:
        return self.role is RoleName.SUPER_ADMIN

    @property
    def has_websites(self) -> bool:
        return bool(self.website_ids)
