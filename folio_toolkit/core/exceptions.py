from __future__ import annotations

"""Packaging pipeline exception classes.

Every fatal condition raised while assembling a book derives from
:class:`PackagingError` so front-ends can report failures uniformly.
Missing optional inputs (images directory, cover, custom stylesheet) are
never reported through these classes.
"""

from pathlib import Path
from typing import Optional, Sequence

__all__ = [
    "PackagingError",
    "PreconditionError",
    "ResourceError",
    "TemplateNotFoundError",
    "TemplateRenderError",
    "HookError",
    "ArchiveError",
]


class PackagingError(Exception):
    """Base exception for all packaging errors."""

    def __init__(self, message: str, cause: Optional[Exception] = None) -> None:
        super().__init__(message)
        self.cause = cause


class PreconditionError(PackagingError):
    """Raised when an internal sequencing invariant is broken.

    Example: the staging directory a step writes into does not exist. This
    is never reachable through normal control flow.
    """
    pass


class ResourceError(PackagingError):
    """Raised when a declared resource (e.g. the cover) cannot be used."""
    pass


class TemplateNotFoundError(PackagingError):
    """Raised when a template is required but no file provides it."""

    def __init__(self, template_name: str, searched_dirs: Optional[Sequence[Path]] = None) -> None:
        self.template_name = template_name
        self.searched_dirs = list(searched_dirs or [])
        if self.searched_dirs:
            dirs = ", ".join(str(d) for d in self.searched_dirs)
            message = f"Template '{template_name}' not found (searched: {dirs})"
        else:
            message = f"Template '{template_name}' not found"
        super().__init__(message)


class TemplateRenderError(PackagingError):
    """Raised when a template exists but cannot be compiled or applied."""

    def __init__(self, message: str, template_name: Optional[str] = None,
                 cause: Optional[Exception] = None) -> None:
        super().__init__(message, cause)
        self.template_name = template_name

    def __str__(self) -> str:
        if self.template_name:
            return f"[Template: {self.template_name}] {super().__str__()}"
        return super().__str__()


class HookError(PackagingError):
    """Raised when a decoration callback breaks its contract."""
    pass


class ArchiveError(PackagingError):
    """Raised when the archive cannot be produced.

    Carries the executed command and its captured error output when the
    external ``zip`` fallback is involved.
    """

    def __init__(self, message: str, command: Optional[str] = None,
                 stderr: Optional[str] = None, cause: Optional[Exception] = None) -> None:
        super().__init__(message, cause)
        self.command = command
        self.stderr = stderr
