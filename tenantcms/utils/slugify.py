import re

from unidecode import unidecode

_NON_SLUG_CHARS = re.compile(r"[^a-z0-9]+")


def slugify(text: str, fallback: str = "page", max_length: int = 200) -> str:
    """
    Turn a page title into a URL slug.

    Non-ASCII characters are transliterated; titles made only of punctuation
    produce ``fallback``.
    """
    slug = _NON_SLUG_CHARS.sub("-", unidecode(text or "").lower()).strip("-")
    slug = slug[:max_length].rstrip("-")
    return slug or fallback
