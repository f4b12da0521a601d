from __future__ import annotations

"""OPF manifest and NCX navigation for the staged book.

The builder only arranges data established by earlier stages (normalised
slugs, resource ids) in the shape the ``content.opf`` and ``toc.ncx``
templates expect; document order is preserved everywhere.
"""

import logging
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, List, Optional, Sequence

from folio_toolkit.core.exceptions import PreconditionError
from folio_toolkit.core.models import CoverDescriptor, Fragment, ResourceDescriptor
from folio_toolkit.core.rendering.document_renderer import (
    CUSTOM_CSS_PATH,
    DEFAULT_CSS_PATH,
    TITLEPAGE_FILENAME,
)
from folio_toolkit.core.rendering.engine import TemplateEngine

if TYPE_CHECKING:  # pragma: no cover - for type checkers only
    from folio_toolkit.core.context import PublishingContext

logger = logging.getLogger(__name__)

__all__ = [
    "ManifestItem",
    "GuideReference",
    "NavPoint",
    "Manifest",
    "ManifestBuilder",
]

XHTML_MEDIA_TYPE = "application/xhtml+xml"
CSS_MEDIA_TYPE = "text/css"
NCX_MEDIA_TYPE = "application/x-dtbncx+xml"


@dataclass
class ManifestItem:
    id: str
    href: str
    media_type: str


@dataclass
class GuideReference:
    type: str
    title: str
    href: str


@dataclass
class NavPoint:
    id: str
    play_order: int
    label: str
    src: str
    level: int = 1
    children: List["NavPoint"] = field(default_factory=list)


@dataclass
class Manifest:
    """Derived package description; built once per run."""
    items: List[ManifestItem] = field(default_factory=list)
    spine: List[str] = field(default_factory=list)
    guide: List[GuideReference] = field(default_factory=list)
    nav_points: List[NavPoint] = field(default_factory=list)
    depth: int = 1
    cover: Optional[CoverDescriptor] = None

    @property
    def ids(self) -> List[str]:
        return [item.id for item in self.items]


class ManifestBuilder:
    """Assembles :class:`Manifest` objects and renders them."""

    def __init__(self, context: "PublishingContext") -> None:
        self.context = context

    def build(self,
              items: Sequence[Fragment],
              images: Sequence[ResourceDescriptor],
              cover: Optional[CoverDescriptor],
              has_custom_css: bool,
              fonts: Sequence[ResourceDescriptor] = ()) -> Manifest:
        """Describe every packaged file plus reading order and navigation.

        Args:
            items: Book items with normalised slugs, in document order
            images: Image descriptors from the resource collector
            cover: Cover descriptor or None when the book has no cover
            has_custom_css: Whether ``css/styles.css`` was staged
            fonts: Embedded fonts (none are collected by default)

        Raises:
            PreconditionError: If two entries share an id
        """
        manifest = Manifest(cover=cover)
        entries = manifest.items

        entries.append(ManifestItem("ncx", "toc.ncx", NCX_MEDIA_TYPE))
        entries.append(ManifestItem("titlepage", TITLEPAGE_FILENAME, XHTML_MEDIA_TYPE))
        if self.context.include_styles:
            entries.append(ManifestItem("css", DEFAULT_CSS_PATH, CSS_MEDIA_TYPE))
        if has_custom_css:
            entries.append(ManifestItem("custom-css", CUSTOM_CSS_PATH, CSS_MEDIA_TYPE))
        for font in fonts:
            entries.append(ManifestItem(font.id, font.file_path, font.media_type))

        listed_hrefs = set()
        if cover is not None:
            entries.append(ManifestItem(cover.id, cover.file_path, cover.media_type))
            listed_hrefs.add(cover.file_path)
        for image in images:
            # the cover may also live in the images directory
            if image.file_path in listed_hrefs:
                continue
            entries.append(ManifestItem(image.id, image.file_path, image.media_type))
            listed_hrefs.add(image.file_path)

        for item in items:
            entries.append(ManifestItem(item.slug, f"{item.slug}.html", XHTML_MEDIA_TYPE))

        duplicates = sorted(id_ for id_, count in Counter(manifest.ids).items() if count > 1)
        if duplicates:
            raise PreconditionError(f"Duplicate manifest ids: {duplicates}")

        manifest.spine = ["titlepage"] + [item.slug for item in items]

        manifest.guide.append(GuideReference("cover", "Cover", TITLEPAGE_FILENAME))
        for item in items:
            if item.element == "toc":
                manifest.guide.append(GuideReference("toc", item.nav_label, f"{item.slug}.html"))
                break

        manifest.nav_points, manifest.depth = self._build_navigation(items)
        logger.debug("Manifest: %d entries, %d spine items, nav depth %d",
                      len(entries), len(manifest.spine), manifest.depth)
        return manifest

    def _build_navigation(self, items: Sequence[Fragment]) -> tuple[List[NavPoint], int]:
        """Return top-level nav points (one per item) and the deepest level used."""
        max_level = max(1, int(self.context.toc_depth))
        nav_points: List[NavPoint] = []
        play_order = 0
        depth = 1

        for item in items:
            play_order += 1
            page = f"{item.slug}.html"
            root = NavPoint(
                id=f"navpoint-{play_order}",
                play_order=play_order,
                label=item.nav_label,
                src=page,
                level=item.toc[0].level if item.toc else 1,
            )
            nav_points.append(root)

            # stack of open nav points; children attach to the nearest shallower one
            stack = [root]
            for entry in item.toc[1:]:
                if entry.level > max_level:
                    continue
                while len(stack) > 1 and stack[-1].level >= entry.level:
                    stack.pop()
                play_order += 1
                point = NavPoint(
                    id=f"navpoint-{play_order}",
                    play_order=play_order,
                    label=entry.nav_label,
                    src=f"{page}#{entry.slug}" if entry.slug else page,
                    level=entry.level,
                )
                stack[-1].children.append(point)
                stack.append(point)
                depth = max(depth, len(stack))

        return nav_points, depth

    def render(self, manifest: Manifest, engine: TemplateEngine, oebps_dir: str | Path) -> List[Path]:
        """Write ``content.opf`` and ``toc.ncx`` into *oebps_dir*."""
        oebps_dir = Path(oebps_dir)
        book = self.context.book
        opf = engine.render_to_file("content.opf", {
            "book": book,
            "cover": manifest.cover,
            "manifest": manifest.items,
            "spine": manifest.spine,
            "guide": manifest.guide,
        }, oebps_dir / "content.opf")
        ncx = engine.render_to_file("toc.ncx", {
            "book": book,
            "depth": manifest.depth,
            "nav_points": manifest.nav_points,
        }, oebps_dir / "toc.ncx")
        logger.info("Manifest: content.opf and toc.ncx written")
        return [opf, ncx]
