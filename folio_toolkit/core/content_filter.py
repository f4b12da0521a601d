from __future__ import annotations

"""Selection of the fragments that take part in an EPUB edition."""

import logging
from typing import Iterable, List

from folio_toolkit.core.models import Fragment

logger = logging.getLogger(__name__)

__all__ = ["ALWAYS_EXCLUDED_ELEMENTS", "filter_contents"]

# 'cover' is rendered separately as the title page; lists of tables and
# figures have no meaning in reflowable books.
ALWAYS_EXCLUDED_ELEMENTS = frozenset({"cover", "lot", "lof"})


def filter_contents(fragments: Iterable[Fragment], use_html_toc: bool = False) -> List[Fragment]:
    """Return *fragments* without the elements this output never includes.

    The ``toc`` fragment is kept only when *use_html_toc* is set (e.g. books
    converted to Kindle format). Order is preserved.
    """
    excluded = set(ALWAYS_EXCLUDED_ELEMENTS)
    if not use_html_toc:
        excluded.add("toc")

    kept = [fragment for fragment in fragments if fragment.element not in excluded]
    logger.debug("Filter: kept %d fragments (excluded elements: %s)", len(kept), sorted(excluded))
    return kept
