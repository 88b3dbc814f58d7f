"""
Website references.

Website memberships arrive in several shapes: bare ids, ORM ``Website``
objects, or populated dicts from API payloads. They are normalized here,
at the boundary, into ``WebsiteRef`` values so that the access rules only
ever see identifiers.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

WebsiteId = int | str


@dataclass(frozen=True)
class WebsiteRef:
    """Identifier of a website, stripped of any populated payload."""

    id: WebsiteId

    @classmethod
    def coerce(cls, value: Any) -> "WebsiteRef | None":
        """
        Build a reference from an id, a mapping or an object with an ``id``.

        The primary ``id`` wins over the ``_id`` alias. Returns None for null
        or empty input and for objects carrying neither identifier.
        """
        if value is None or isinstance(value, bool):
            return None
        if isinstance(value, WebsiteRef):
            return value
        if isinstance(value, (int, str)):
            return cls(value) if value != "" else None

        if isinstance(value, Mapping):
            ident = value.get("id")
            if ident is None or ident == "":
                ident = value.get("_id")
        else:
            ident = getattr(value, "id", None)
            if ident is None or ident == "":
                ident = getattr(value, "_id", None)

        if ident is None or ident == "" or isinstance(ident, bool):
            return None
        return cls(ident)


def to_website_id(value: Any) -> WebsiteId | None:
    """Return the website id referenced by ``value``, or None."""
    ref = WebsiteRef.coerce(value)
    return ref.id if ref is not None else None


def extract_website_ids(websites: Iterable[Any] | None) -> list[WebsiteId]:
    """
    Extract website ids from a membership collection.

    Accepts bare ids and populated objects in any mix, drops null entries
    and duplicates, and keeps the first-seen order.
    """
    if not websites:
        return []

    ids: list[WebsiteId] = []
    seen: set[WebsiteId] = set()
    for website in websites:
        ident = to_website_id(website)
        if ident is None or ident in seen:
            continue
        seen.add(ident)
        ids.append(ident)
    return ids
