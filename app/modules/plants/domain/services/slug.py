# 📄 File: app/modules/plants/domain/services/slug.py
# 🧭 Purpose (Layman Explanation):
# Turns a plant's name into a short web-friendly label ("Monstera Deliciosa" -> "monstera-deliciosa")
# and makes sure no two plants of the same person end up with the same label.
# 🧪 Purpose (Technical Summary):
# slugify() and per-owner unique slug generation (base, base-<location>, base-N).
# 🔗 Dependencies:
# re, typing
# 🔄 Connected Modules / Calls From:
# app.modules.plants.domain.services.plant_service (create)

import re
from typing import Collection, Optional

from app.modules.plants.domain.models.care import Location

_NON_ALNUM = re.compile(r"[^a-z0-9]+")
_DASH_RUN = re.compile(r"-+")

DEFAULT_SLUG = "plant"

# Width of plants.slug
MAX_SLUG_LENGTH = 128


def slugify(value: str) -> str:
    """Lowercase, collapse runs of non [a-z0-9] into single dashes, trim dashes."""
    slug = _NON_ALNUM.sub("-", value.lower())
    slug = _DASH_RUN.sub("-", slug)
    return slug.strip("-")


def _fit(stem: str, suffix: str = "") -> str:
    """``stem + suffix`` cut down on the stem side to MAX_SLUG_LENGTH."""
    room = MAX_SLUG_LENGTH - len(suffix)
    return (stem[:room].rstrip("-") or DEFAULT_SLUG[:room]) + suffix


def generate_unique_slug(
    name: str,
    location: Optional[Location],
    taken: Collection[str]
) -> str:
    """
    Pick the first free slug for a new plant.

    Tries the slugified name, then the name suffixed with the room (or position),
    then ``<name>-1``, ``<name>-2`` and so on. Every candidate is cut to
    MAX_SLUG_LENGTH characters.

    Args:
        name: Plant name
        location: Optional location used for the second candidate
        taken: Slugs already used by the same owner

    Returns:
        str: A slug not present in ``taken``
    """
    base = _fit(slugify(name) or DEFAULT_SLUG)
    if base not in taken:
        return base

    location_part = ""
    if location is not None:
        location_part = slugify(location.room) or slugify(location.position)
    if location_part:
        candidate = _fit(f"{base}-{location_part}")
        if candidate not in taken:
            return candidate

    counter = 1
    while _fit(base, f"-{counter}") in taken:
        counter += 1
    return _fit(base, f"-{counter}")
