from __future__ import annotations

"""Collection of the binary resources embedded in the package.

Both helpers copy files into the staging ``OEBPS/images`` directory and
return the descriptors the manifest needs. Missing optional inputs (no
images directory, no cover) are reported as empty results.
"""

import logging
from pathlib import Path
from typing import List, Optional

from PIL import Image, UnidentifiedImageError

from folio_toolkit.core.exceptions import PreconditionError, ResourceError
from folio_toolkit.core.models import CoverDescriptor, ResourceDescriptor
from folio_toolkit.core.utils import copy_file, media_type_for

logger = logging.getLogger(__name__)

__all__ = [
    "IMAGES_PREFIX",
    "COVER_IMAGE_ID",
    "discover_files",
    "prepare_book_images",
    "prepare_cover_image",
]

IMAGES_PREFIX = "images"
COVER_IMAGE_ID = "cover-image"


def _require_target_dir(target_dir: Path) -> None:
    if not target_dir.is_dir():
        raise PreconditionError(
            f"Book images couldn't be copied because the given '{target_dir}' "
            "directory doesn't exist."
        )


def discover_files(source_dir: Path) -> List[Path]:
    """Return every non-hidden file under *source_dir*, sorted by relative path."""
    found = []
    for path in source_dir.rglob("*"):
        rel = path.relative_to(source_dir)
        if any(part.startswith(".") for part in rel.parts):
            continue
        if path.is_file():
            found.append(path)
    return sorted(found, key=lambda p: p.relative_to(source_dir).as_posix())


def prepare_book_images(source_dir: str | Path, target_dir: str | Path) -> List[ResourceDescriptor]:
    """Copy the book images into *target_dir* and describe them.

    Args:
        source_dir: Directory holding the author's images (may not exist)
        target_dir: Staging ``images`` directory (must exist)

    Returns:
        One descriptor per file, ids ``figure-1`` .. ``figure-N`` in
        discovery order

    Raises:
        PreconditionError: If *target_dir* does not exist
    """
    source_dir = Path(source_dir)
    target_dir = Path(target_dir)
    _require_target_dir(target_dir)

    if not source_dir.is_dir():
        logger.debug("Images: no images directory at %s", source_dir)
        return []

    images: List[ResourceDescriptor] = []
    for index, image in enumerate(discover_files(source_dir), start=1):
        rel = image.relative_to(source_dir).as_posix()
        copy_file(image, target_dir / rel)
        images.append(ResourceDescriptor(
            id=f"figure-{index}",
            file_path=f"{IMAGES_PREFIX}/{rel}",
            media_type=media_type_for(image),
        ))

    logger.info("Images: %d collected", len(images))
    return images


def prepare_cover_image(cover_path: Optional[str | Path], target_dir: str | Path) -> Optional[CoverDescriptor]:
    """Copy the custom cover image (if any) and read its geometry.

    The media type comes from the image header, not from the extension.

    Raises:
        PreconditionError: If *target_dir* does not exist
        ResourceError: If the declared cover is missing or not a readable image
    """
    target_dir = Path(target_dir)
    _require_target_dir(target_dir)

    if cover_path is None:
        return None

    cover_path = Path(cover_path)
    try:
        with Image.open(cover_path) as img:
            width, height = img.size
            media_type = Image.MIME.get(img.format or "", "")
    except FileNotFoundError as e:
        raise ResourceError(f"Cover image not found: {cover_path}", cause=e) from e
    except (UnidentifiedImageError, OSError) as e:
        raise ResourceError(f"Cover image could not be read: {cover_path}: {e}", cause=e) from e

    if not media_type:
        media_type = media_type_for(cover_path)

    copy_file(cover_path, target_dir / cover_path.name)
    logger.info("Cover: %s (%dx%d, %s)", cover_path.name, width, height, media_type)
    return CoverDescriptor(
        id=COVER_IMAGE_ID,
        file_path=f"{IMAGES_PREFIX}/{cover_path.name}",
        media_type=media_type,
        width=width,
        height=height,
    )
