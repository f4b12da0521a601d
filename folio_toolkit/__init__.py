"""Top-level package of Folio Toolkit.

Folio Toolkit packages a book's rendered fragments into an EPUB file.
Front-ends should only depend on the public API exposed here rather than
importing internal modules directly.
"""

from .core.models import BookMetadata, CoverDescriptor, Fragment, ResourceDescriptor, TocEntry
from .core.context import PublishingContext
from .core.services import EpubPublisher

__all__: list[str] = [
    "BookMetadata",
    "CoverDescriptor",
    "EpubPublisher",
    "Fragment",
    "PublishingContext",
    "ResourceDescriptor",
    "TocEntry",
]
