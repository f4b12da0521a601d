from __future__ import annotations

"""Decoration hooks run around every fragment before packaging.

Extensions register plain callables; each receives its own copy of the
fragment plus the run context and returns the fragment to use from then on.
"""

import copy
import logging
from typing import TYPE_CHECKING, Callable, List

from folio_toolkit.core.exceptions import HookError
from folio_toolkit.core.models import Fragment

if TYPE_CHECKING:  # pragma: no cover - for type checkers only
    from folio_toolkit.core.context import PublishingContext

logger = logging.getLogger(__name__)

__all__ = ["DecorationHook", "DecorationHooks"]

DecorationHook = Callable[[Fragment, "PublishingContext"], Fragment]


class DecorationHooks:
    """Ordered pre/post decoration callbacks."""

    def __init__(self) -> None:
        self._pre: List[DecorationHook] = []
        self._post: List[DecorationHook] = []

    def register_pre(self, callback: DecorationHook) -> None:
        self._pre.append(callback)

    def register_post(self, callback: DecorationHook) -> None:
        self._post.append(callback)

    def __len__(self) -> int:
        return len(self._pre) + len(self._post)

    def decorate(self, fragment: Fragment, context: "PublishingContext") -> Fragment:
        """Run every pre then post callback over an owned copy of *fragment*.

        Raises:
            HookError: If a callback fails or does not return a Fragment
        """
        current = copy.deepcopy(fragment)
        for callback in [*self._pre, *self._post]:
            name = getattr(callback, "__qualname__", repr(callback))
            try:
                result = callback(copy.deepcopy(current), context)
            except Exception as e:
                logger.debug("Hook %s failed on '%s': %s", name, fragment.page_name, e)
                raise HookError(f"Decoration hook {name} failed: {e}", cause=e) from e
            if not isinstance(result, Fragment):
                raise HookError(
                    f"Decoration hook {name} returned invalid type: {type(result).__name__}"
                )
            current = result
        return current
