"""Page identifiers and alias resolution.

Every climb has one canonical slug derived from its primary name. Its
segment's own name and any configured aliases resolve to further slugs which
must land on the same page; those become redirects rather than copies.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

from loguru import logger

if TYPE_CHECKING:
    from windsock.climbs import Climb

CURRENT_SLUG = "current"

# Page renditions every canonical directory carries; aliases redirect each one.
RENDITIONS = ("index", "baseline", "historical")

_SLUG_RE = re.compile(r"[\W_]+")


def slugify(s: str) -> str:
    """Lower-case ``s`` and collapse runs of non-alphanumerics into single hyphens."""
    return _SLUG_RE.sub("-", s).strip("-").lower()


def alias_names(climb: Climb) -> list[str]:
    """Names besides the primary one under which a climb is reachable."""
    return [climb.segment.name, *climb.aliases]


@dataclass(frozen=True)
class Redirect:
    """One indirection from an alias rendition to the canonical rendition.

    Paths are relative to the site root; ``target`` is relative to the
    directory holding ``path`` so the link survives relocating the site.
    """

    path: str
    target: str


def resolve_aliases(climbs: Sequence[Climb]) -> dict[str, str]:
    """Map every alias slug to the canonical slug of the climb it names.

    Aliases that slugify to their own climb's canonical slug, or to a slug
    already handled, are skipped. An alias that collides with another climb's
    canonical slug is dropped; one claimed by two climbs keeps the first.

    Args:
        climbs: Climbs in input order (visible and hidden)

    Returns:
        Mapping of alias slug to canonical slug
    """
    canonical = {slugify(c.name): c.name for c in climbs}
    aliases: dict[str, str] = {}
    for climb in climbs:
        target = slugify(climb.name)
        for name in alias_names(climb):
            slug = slugify(name)
            if not slug or slug == target:
                continue
            existing = aliases.get(slug)
            if existing == target:
                continue
            if slug in canonical:
                logger.warning(
                    "Alias collides with a canonical climb page, skipping",
                    alias=name,
                    climb=climb.name,
                    owner=canonical[slug],
                )
                continue
            if existing is not None:
                logger.warning(
                    "Alias already claimed by another climb, skipping",
                    alias=name,
                    climb=climb.name,
                    owner=existing,
                )
                continue
            aliases[slug] = target
    return aliases


def redirects(alias: str, canonical: str, filename: str = "index.html") -> list[Redirect]:
    """Return the redirect entries an alias directory needs."""
    out = [Redirect(path=f"{alias}/{filename}", target=f"../{canonical}/{filename}")]
    for rendition in RENDITIONS[1:]:
        out.append(
            Redirect(
                path=f"{alias}/{rendition}/{filename}",
                target=f"../../{canonical}/{rendition}/{filename}",
            )
        )
    return out
