from __future__ import annotations

"""High-level EPUB publishing service.

Entry-point for any front-end (CLI, build tool, API) that needs to turn a
book's fragments into a packaged ``.epub`` file. All run state comes from
the :class:`PublishingContext` handed to the constructor.
"""

import logging
from pathlib import Path
from typing import List, Optional, Sequence

from folio_toolkit.core.archive import Archiver, select_archiver
from folio_toolkit.core.content_filter import filter_contents
from folio_toolkit.core.context import PublishingContext
from folio_toolkit.core.generators.manifest_builder import ManifestBuilder
from folio_toolkit.core.models import Fragment
from folio_toolkit.core.rendering.document_renderer import CUSTOM_CSS_PATH, DocumentRenderer
from folio_toolkit.core.rendering.engine import TemplateEngine
from folio_toolkit.core.resources import prepare_book_images, prepare_cover_image
from folio_toolkit.core.slugs import normalize_slugs
from folio_toolkit.core.staging import staging_tree
from folio_toolkit.core.utils import copy_file, replace_file

logger = logging.getLogger(__name__)

__all__ = ["EpubPublisher"]


class EpubPublisher:
    """Publishes one book as an EPUB 2 file."""

    def __init__(self, context: PublishingContext, engine: Optional[TemplateEngine] = None,
                 archiver: Optional[Archiver] = None) -> None:
        self.context = context
        self.engine = engine or TemplateEngine(context.templates_dirs)
        self.archiver = archiver or select_archiver(context.archiver, context.zip_executable)
        self.renderer = DocumentRenderer(self.engine, context)
        self.manifest_builder = ManifestBuilder(context)
        self.logger = logger

    # ---------------------------------------------------------------------
    # PUBLIC API
    # ---------------------------------------------------------------------
    def publish(self) -> Path:
        """Full pipeline: filter, decorate and assemble the book."""
        self.logger.info("Publish: '%s' (%d fragments)", self.context.book.title, len(self.context.contents))
        items = self.load_contents()
        items = self.decorate_contents(items)
        return self.assemble_book(items)

    def load_contents(self) -> List[Fragment]:
        """Return the fragments that take part in this edition."""
        return filter_contents(self.context.contents, self.context.use_html_toc)

    def decorate_contents(self, items: Sequence[Fragment]) -> List[Fragment]:
        """Run the registered decoration hooks over every item."""
        if not len(self.context.hooks):
            return list(items)
        return [self.context.hooks.decorate(item, self.context) for item in items]

    def assemble_book(self, items: Sequence[Fragment]) -> Path:
        """Stage, render, archive and publish *items*; return the published path.

        The staging directory is removed whatever happens. The output path
        is replaced atomically once the archive is complete, so a failed run
        leaves the previous file (or nothing) in place.
        """
        context = self.context
        output_path = context.output_path

        try:
            with staging_tree(context.book.slug, context.cache_dir) as staging:
                # 1) styles
                if context.include_styles:
                    self.renderer.render_stylesheet(staging.oebps_dir)
                custom_css = context.custom_css()
                has_custom_css = custom_css is not None
                if has_custom_css:
                    copy_file(custom_css, staging.oebps_dir / CUSTOM_CSS_PATH)

                # 2) pages
                items = normalize_slugs(items)
                self.renderer.render_items(items, has_custom_css, staging.oebps_dir)

                # 3) resources
                images = prepare_book_images(context.images_dir, staging.images_dir)
                cover = prepare_cover_image(context.custom_cover_image(), staging.images_dir)
                self.renderer.render_cover_page(cover, has_custom_css, staging.oebps_dir)

                # 4) manifest, navigation and container files
                manifest = self.manifest_builder.build(items, images, cover, has_custom_css)
                self.manifest_builder.render(manifest, self.engine, staging.oebps_dir)
                self.renderer.render_container(staging.meta_inf_dir)
                self.renderer.render_mimetype(staging.book_dir)

                # 5) archive and publish
                archive = self.archiver.create(staging.book_dir, staging.archive_path)
                replace_file(archive, output_path)
        except Exception as e:
            self.logger.error("Publish FAIL: %s", e)
            raise

        self.logger.info("Publish OK: %s size_bytes=%d", output_path, output_path.stat().st_size)
        return output_path
