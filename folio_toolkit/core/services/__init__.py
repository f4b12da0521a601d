"""Service layer of the Folio Toolkit core."""

from .publishing_service import EpubPublisher

__all__ = [
    "EpubPublisher",
]
