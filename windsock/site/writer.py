"""Write a generated site to disk.

Every page directory gets a ``baseline`` and a ``historical`` rendition of its
page data plus an ``index`` symlink to whichever convention is the default.
Alias directories hold only symlinks back to the canonical page.
"""

from __future__ import annotations

import json
import shutil
from pathlib import Path

from loguru import logger

from windsock.forecast.pages import ClimbPage, Site
from windsock.forecast.slugs import redirects

PAGE_FILE = "index.json"


def _write_json(path: Path, payload: dict) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")


def _symlink(path: Path, target: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    if path.is_symlink() or path.exists():
        path.unlink()
    path.symlink_to(target)


def write_page(page_dir: Path, payload: dict, historical_default: bool) -> None:
    """Write both renditions of a page and its index link."""
    for rendition, historical in (("historical", True), ("baseline", False)):
        _write_json(page_dir / rendition / PAGE_FILE, {**payload, "historical": historical})
    default = "historical" if historical_default else "baseline"
    _symlink(page_dir / PAGE_FILE, f"{default}/{PAGE_FILE}")


def write_site(site: Site, output_dir: str | Path, clean: bool = True) -> Path:
    """Write the site's pages and alias links under ``output_dir``.

    Args:
        site: Assembled site
        output_dir: Directory to write into
        clean: Remove ``output_dir`` first so stale pages do not survive

    Returns:
        The output directory
    """
    out = Path(output_dir)
    if clean and out.exists():
        shutil.rmtree(out)
    out.mkdir(parents=True, exist_ok=True)

    for page in site.pages:
        payload = {
            **page.model_dump(mode="json"),
            "generation_time": site.generation_time.isoformat(),
            "absolute_url": site.absolute_url,
        }
        write_page(out / page.canonical_path, payload, site.historical_default)

    climb_slugs = {p.slug for p in site.pages if isinstance(p, ClimbPage)}
    for alias, canonical in site.aliases.items():
        if canonical not in climb_slugs:
            logger.warning(f"Alias {alias} points at missing page {canonical}, skipping")
            continue
        for redirect in redirects(alias, canonical, PAGE_FILE):
            _symlink(out / redirect.path, redirect.target)

    _write_json(out / "failures.json", {"failures": [f.model_dump() for f in site.failures]})
    logger.info(f"Wrote {len(site.pages)} pages and {len(site.aliases)} aliases to {out}")
    return out
