import re

# ASCII \w only, so slugs stay URL-safe
_STRIP = re.compile(r"[^\w -]+", re.ASCII)
_SEPARATORS = re.compile(r"[ -]+")


def slugify(title: str) -> str:
    """Lowercase, drop symbols and non-ASCII letters, join words with single hyphens.

    "My First Bug!" -> "my-first-bug"; a slug maps to itself.
    """
    name = _STRIP.sub("", title.lower())
    return _SEPARATORS.sub("-", name)
