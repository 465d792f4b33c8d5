"""
Public slug generation.

Slugs are derived from the person's name and made unique by suffixing
`-1`, `-2`, ... Once a profile is published its slug never changes.
"""

import re
import secrets
import string
from typing import Callable, Optional

_NON_ALNUM = re.compile(r"[^a-z0-9]+")

MAX_SUFFIX_ATTEMPTS = 1000


def slugify(*parts: Optional[str]) -> str:
    """Lowercase, replace runs of non-alphanumerics with `-`, trim dashes."""
    text = " ".join(part for part in parts if part)
    return _NON_ALNUM.sub("-", text.lower()).strip("-")


def random_slug() -> str:
    alphabet = string.ascii_lowercase + string.digits
    return "profile-" + "".join(secrets.choice(alphabet) for _ in range(9))


def generate_unique_slug(
    first_name: Optional[str],
    last_name: Optional[str],
    exists: Callable[[str], bool],
) -> str:
    """
    Build a slug for a new profile.

    Args:
        first_name: Given name
        last_name: Family name
        exists: Returns True if a slug is already taken

    Returns:
        `first-last`, `first-last-1`, ... or a random `profile-xxxx` slug
        when the name yields nothing usable
    """
    base = slugify(first_name, last_name)
    if not base:
        candidate = random_slug()
        while exists(candidate):
            candidate = random_slug()
        return candidate

    if not exists(base):
        return base
    for counter in range(1, MAX_SUFFIX_ATTEMPTS + 1):
        candidate = f"{base}-{counter}"
        if not exists(candidate):
            return candidate
    return f"{base}-{random_slug().removeprefix('profile-')}"
