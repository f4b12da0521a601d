from __future__ import annotations

"""Slug normalisation for packaged pages.

Pages are not named after the author's labels (``introduction-to-lorem.html``)
but after their content type and number (``chapter-1.html``), so file names
survive edits to heading text and differently-worded chapters never clash.
"""

import copy
import logging
import re
from typing import Iterable, List

from folio_toolkit.core.models import Fragment, TocEntry
from folio_toolkit.core.utils import slugify

logger = logging.getLogger(__name__)

__all__ = ["RESERVED_SLUGS", "RESERVED_SLUG_PATTERN", "normalize_slugs"]

# Names already taken by files and manifest ids of the package layout
RESERVED_SLUGS = frozenset({"titlepage", "ncx", "css", "custom-css", "cover-image"})
# Manifest ids generated for resources (figure-1, font-2, ...)
RESERVED_SLUG_PATTERN = re.compile(r"^(figure|font)-\d+$")


def normalize_slugs(fragments: Iterable[Fragment]) -> List[Fragment]:
    """Return copies of *fragments* whose slugs derive from element and number.

    Both ``slug`` and ``toc[0].slug`` receive the new value. Repeated names
    get ``-2``, ``-3``... suffixes in document order, as do names shaped like
    resource ids (``figure-1``).
    """
    used: set[str] = set(RESERVED_SLUGS)
    normalized: List[Fragment] = []

    for fragment in fragments:
        item = copy.deepcopy(fragment)
        base = slugify(item.page_name) or "page"

        slug = base
        suffix = 2
        while slug in used or RESERVED_SLUG_PATTERN.match(slug):
            slug = f"{base}-{suffix}"
            suffix += 1
        used.add(slug)

        item.slug = slug
        if not item.toc:
            item.toc.append(TocEntry(level=1, title=item.title, label=item.label))
        item.toc[0].slug = slug
        normalized.append(item)

    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("Slugs: %s", [item.slug for item in normalized])
    return normalized
