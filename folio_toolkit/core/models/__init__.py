from __future__ import annotations

"""Shared data structures used across the Folio Toolkit core.

This package exposes dataclasses and value objects used by services and other
core layers. It is intentionally free of I/O code so that the contained
objects can be reused in any context (unit-tests, CLI, services, etc.).
"""

import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from folio_toolkit.core.utils import slugify

__all__ = [
    "TocEntry",
    "Fragment",
    "ResourceDescriptor",
    "CoverDescriptor",
    "BookMetadata",
]


@dataclass
class TocEntry:
    """One navigation entry of a fragment.

    The first entry of :attr:`Fragment.toc` always describes the fragment
    itself; the following ones are its inner headings.
    """
    level: int = 1
    title: str = ""
    label: str = ""
    slug: str = ""

    @property
    def nav_label(self) -> str:
        """Return the text shown in reading-system navigation."""
        return " ".join(part for part in (self.label, self.title) if part).strip()


@dataclass
class Fragment:
    """One unit of book content (chapter, appendix, toc, ...).

    Attributes
    ----------
    element
        Content type tag (``chapter``, ``appendix``, ``toc``, ``cover`` ...).
    number
        Ordinal position within its type, when the type is numbered.
    content
        Already rendered markup of the fragment body.
    toc
        Navigation entries; ``toc[0]`` references the fragment itself.
    slug
        File-system-safe identifier; overwritten by slug normalisation.
    metadata
        Free-form values that decoration hooks may read or add.
    """

    element: str
    number: Optional[int] = None
    title: str = ""
    label: str = ""
    content: str = ""
    toc: List[TocEntry] = field(default_factory=list)
    slug: str = ""
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def page_name(self) -> str:
        """Return ``"<element> <number>"`` or ``"<element>"``."""
        if self.number is not None:
            return f"{self.element} {self.number}"
        return self.element

    @property
    def nav_label(self) -> str:
        if self.toc and self.toc[0].nav_label:
            return self.toc[0].nav_label
        return " ".join(part for part in (self.label, self.title) if part) or self.page_name.title()


@dataclass
class ResourceDescriptor:
    """An image embedded in the package."""
    id: str
    file_path: str  # relative to the OEBPS root, e.g. "images/a.png"
    media_type: str


@dataclass
class CoverDescriptor(ResourceDescriptor):
    """Cover art; the manifest format requires declared pixel geometry."""
    width: int = 0
    height: int = 0


@dataclass
class BookMetadata:
    """Book-level values written to the OPF and NCX heads."""

    title: str
    author: str = ""
    language: str = ""
    publisher: str = ""
    identifier: str = ""
    publication_date: str = ""
    slug: str = ""

    def __post_init__(self) -> None:
        if not self.identifier:
            self.identifier = f"urn:uuid:{uuid.uuid4()}"
        if not self.slug:
            self.slug = slugify(self.title) or "book"
