from __future__ import annotations

"""Per-run publishing context.

One :class:`PublishingContext` is built for every assembly run and passed
explicitly to each pipeline component, so every dependency a component has
(directories, edition options, hooks) is visible in its signature.
"""

import logging
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from folio_toolkit.config import ConfigManager
from folio_toolkit.core.hooks import DecorationHooks
from folio_toolkit.core.models import BookMetadata, Fragment

logger = logging.getLogger(__name__)

__all__ = ["PublishingContext"]


@dataclass
class PublishingContext:
    """Everything one assembly run needs to know.

    Attributes
    ----------
    book
        Book-level metadata (title, author, identifier, slug...). When it
        declares no language, the context holds a copy with the default.
    contents
        Full ordered fragment list as produced by the document model.
    contents_dir
        Book source directory; images live in ``<contents_dir>/images``.
    output_dir
        Directory receiving the published archive.
    cache_dir
        Parent of the staging directory (system temp dir when None).
    templates_dirs
        User template directories, searched before the built-in templates.
        They may also hold ``style.css`` and the cover image.
    """

    book: BookMetadata
    contents: List[Fragment]
    contents_dir: Path
    output_dir: Path
    cache_dir: Optional[Path] = None
    templates_dirs: List[Path] = field(default_factory=list)
    use_html_toc: bool = False
    include_styles: bool = True
    cover_image: Optional[Path] = None
    toc_depth: int = 2
    package_extension: str = "epub"
    cover_image_names: List[str] = field(default_factory=lambda: ["cover.jpg", "cover.jpeg", "cover.png"])
    custom_css_name: str = "style.css"
    archiver: str = "auto"
    zip_executable: str = "zip"
    hooks: DecorationHooks = field(default_factory=DecorationHooks)

    def __post_init__(self) -> None:
        self.contents_dir = Path(self.contents_dir)
        self.output_dir = Path(self.output_dir)
        if self.cache_dir is not None:
            self.cache_dir = Path(self.cache_dir)
        if self.cover_image is not None:
            self.cover_image = Path(self.cover_image)
        self.templates_dirs = [Path(d) for d in self.templates_dirs]
        if not self.book.language:
            self.book = replace(self.book, language="en")

    @classmethod
    def from_config(
        cls,
        book: BookMetadata,
        contents: Sequence[Fragment],
        contents_dir: str | Path,
        output_dir: str | Path,
        **overrides: Any,
    ) -> "PublishingContext":
        """Build a context from the edition defaults plus explicit *overrides*."""
        defaults = ConfigManager().get_edition_defaults()
        known = set(cls.__dataclass_fields__)
        options: Dict[str, Any] = {key: value for key, value in defaults.items() if key in known}
        options.update(overrides)
        if not book.language:
            book = replace(book, language=defaults.get("language") or "en")
        return cls(
            book=book,
            contents=list(contents),
            contents_dir=Path(contents_dir),
            output_dir=Path(output_dir),
            **options,
        )

    # ------------------------------------------------------------------
    # Derived locations
    # ------------------------------------------------------------------
    @property
    def images_dir(self) -> Path:
        return self.contents_dir / "images"

    @property
    def output_path(self) -> Path:
        return self.output_dir / f"{self.book.slug}.{self.package_extension}"

    def custom_template(self, name: str) -> Optional[Path]:
        """Return the first user-provided file called *name*, if any."""
        for directory in self.templates_dirs:
            candidate = directory / name
            if candidate.is_file():
                return candidate
        return None

    def custom_css(self) -> Optional[Path]:
        return self.custom_template(self.custom_css_name)

    def custom_cover_image(self) -> Optional[Path]:
        """Return the configured cover or the first cover found in the templates."""
        if self.cover_image is not None:
            return self.cover_image
        for name in self.cover_image_names:
            found = self.custom_template(name)
            if found is not None:
                return found
        return None
