from __future__ import annotations

"""Temporary directory tree mirroring the EPUB layout.

::

    <tmp>/book/mimetype
    <tmp>/book/META-INF/container.xml
    <tmp>/book/OEBPS/{content.opf, toc.ncx, *.html}
    <tmp>/book/OEBPS/{css, images, fonts}/
    <tmp>/book.zip
"""

import logging
import tempfile
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Optional

logger = logging.getLogger(__name__)

__all__ = ["StagingTree", "staging_tree"]


@dataclass(frozen=True)
class StagingTree:
    root: Path

    @property
    def book_dir(self) -> Path:
        return self.root / "book"

    @property
    def meta_inf_dir(self) -> Path:
        return self.book_dir / "META-INF"

    @property
    def oebps_dir(self) -> Path:
        return self.book_dir / "OEBPS"

    @property
    def css_dir(self) -> Path:
        return self.oebps_dir / "css"

    @property
    def images_dir(self) -> Path:
        return self.oebps_dir / "images"

    @property
    def fonts_dir(self) -> Path:
        return self.oebps_dir / "fonts"

    @property
    def archive_path(self) -> Path:
        return self.root / "book.zip"

    def create_skeleton(self) -> "StagingTree":
        for directory in (self.meta_inf_dir, self.css_dir, self.images_dir, self.fonts_dir):
            directory.mkdir(parents=True, exist_ok=True)
        return self


@contextmanager
def staging_tree(prefix: str, parent: Optional[Path] = None) -> Iterator[StagingTree]:
    """Yield a fresh :class:`StagingTree`; it is removed on every exit path.

    The directory name is random (``tempfile``), so concurrent runs for the
    same book never share a staging tree.
    """
    if parent is not None:
        Path(parent).mkdir(parents=True, exist_ok=True)
    with tempfile.TemporaryDirectory(prefix=f"{prefix}-", dir=parent) as tmp_dir:
        logger.debug("Staging: created %s", tmp_dir)
        yield StagingTree(Path(tmp_dir)).create_skeleton()
    logger.debug("Staging: removed %s", tmp_dir)
