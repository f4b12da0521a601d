from __future__ import annotations

"""Rendering of the staged markup files.

Each book item is written to ``<slug>.html``. The page template is chosen
by content type: a template named after the item's element (``chapter``,
``toc``...) wins, and ``chunk`` is the universal default.
"""

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Sequence

from folio_toolkit.core.exceptions import TemplateNotFoundError
from folio_toolkit.core.models import CoverDescriptor, Fragment
from folio_toolkit.core.rendering.engine import TemplateEngine, write_rendered

if TYPE_CHECKING:  # pragma: no cover - for type checkers only
    from folio_toolkit.core.context import PublishingContext

logger = logging.getLogger(__name__)

__all__ = [
    "FALLBACK_TEMPLATE",
    "DEFAULT_CSS_PATH",
    "CUSTOM_CSS_PATH",
    "TITLEPAGE_FILENAME",
    "DocumentRenderer",
]

FALLBACK_TEMPLATE = "chunk"
DEFAULT_CSS_PATH = "css/book.css"
CUSTOM_CSS_PATH = "css/styles.css"
TITLEPAGE_FILENAME = "titlepage.html"


class DocumentRenderer:
    """Writes book pages and the fixed container files through *engine*."""

    def __init__(self, engine: TemplateEngine, context: "PublishingContext") -> None:
        self.engine = engine
        self.context = context

    def _page_variables(self, has_custom_css: bool) -> Dict[str, Any]:
        return {
            "book": self.context.book,
            "has_custom_css": has_custom_css,
            "include_styles": self.context.include_styles,
            "toc_depth": self.context.toc_depth,
        }

    # ------------------------------------------------------------------
    # Book items
    # ------------------------------------------------------------------
    def render_item(self, item: Fragment, items: Sequence[Fragment], has_custom_css: bool,
                    target_dir: str | Path) -> Path:
        """Render *item* into ``<target_dir>/<slug>.html``.

        Raises:
            TemplateNotFoundError: If neither the element template nor the
                ``chunk`` fallback exists
            TemplateRenderError: If the chosen template fails
        """
        variables = self._page_variables(has_custom_css)
        variables["item"] = item
        variables["items"] = list(items)

        result = self.engine.try_render(item.element, variables)
        if not result.found:
            logger.debug("Render: no '%s' template, using '%s'", item.element, FALLBACK_TEMPLATE)
            result = self.engine.try_render(FALLBACK_TEMPLATE, variables)
            if not result.found:
                raise TemplateNotFoundError(FALLBACK_TEMPLATE, self.engine.search_dirs)

        return write_rendered(result.content, Path(target_dir) / f"{item.slug}.html")

    def render_items(self, items: Sequence[Fragment], has_custom_css: bool,
                     target_dir: str | Path) -> List[Path]:
        paths = [self.render_item(item, items, has_custom_css, target_dir) for item in items]
        logger.info("Render: %d pages written", len(paths))
        return paths

    # ------------------------------------------------------------------
    # Fixed files
    # ------------------------------------------------------------------
    def render_cover_page(self, cover: Optional[CoverDescriptor], has_custom_css: bool,
                          target_dir: str | Path) -> Path:
        variables = self._page_variables(has_custom_css)
        variables["cover"] = cover
        return self.engine.render_to_file("cover", variables, Path(target_dir) / TITLEPAGE_FILENAME)

    def render_stylesheet(self, target_dir: str | Path) -> Path:
        """Render the built-in stylesheet into ``<target_dir>/css/book.css``."""
        return self.engine.render_to_file(
            "style.css", {"book": self.context.book}, Path(target_dir) / DEFAULT_CSS_PATH
        )

    def render_container(self, meta_inf_dir: str | Path) -> Path:
        return self.engine.render_to_file("container.xml", {}, Path(meta_inf_dir) / "container.xml")

    def render_mimetype(self, book_dir: str | Path) -> Path:
        return self.engine.render_to_file("mimetype", {}, Path(book_dir) / "mimetype")
