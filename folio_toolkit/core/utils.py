from __future__ import annotations

"""Simple reusable helper functions.

These helpers are side-effect-free apart from :func:`copy_file`, which is
the single place the pipeline copies author files into a staging tree, and
:func:`replace_file`, which publishes finished files.
"""

import logging
import mimetypes
import os
import re
import shutil
import tempfile
import unicodedata
from pathlib import Path

__all__ = [
    "slugify",
    "media_type_for",
    "copy_file",
    "replace_file",
]

logger = logging.getLogger(__name__)


def slugify(text: str) -> str:
    """Return a file-system-safe slug version of *text*.

    Transliterates to ASCII, lower-cases the result and collapses every run
    of whitespace or punctuation into a single hyphen.

    Examples:
        >>> slugify("Chapter 3")
        'chapter-3'
        >>> slugify("  Préface: l'été ")
        'preface-l-ete'
    """
    if not text:
        return ""
    text = unicodedata.normalize("NFKD", str(text)).encode("ascii", "ignore").decode("ascii")
    text = re.sub(r"[^a-z0-9]+", "-", text.lower())
    return text.strip("-")


def media_type_for(path: str | Path) -> str:
    """Return the image media type inferred from *path*'s extension.

    Known extensions go through the :mod:`mimetypes` registry (``.jpg`` is
    ``image/jpeg``); anything else maps to ``image/<ext>``.
    """
    guessed, _ = mimetypes.guess_type(str(path))
    if guessed and guessed.startswith("image/"):
        return guessed
    ext = Path(path).suffix.lower().lstrip(".")
    return f"image/{ext}" if ext else "application/octet-stream"


def copy_file(source: str | Path, destination: str | Path) -> Path:
    """Copy *source* to *destination*, overwriting and creating parents."""
    destination = Path(destination)
    destination.parent.mkdir(parents=True, exist_ok=True)
    try:
        shutil.copyfile(source, destination)
    except Exception:
        logger.debug("I/O FAIL: copy %s -> %s", source, destination, exc_info=True)
        raise
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("I/O: copied %s -> %s", source, destination)
    return destination


def replace_file(source: str | Path, destination: str | Path) -> Path:
    """Copy *source* over *destination* in a single atomic step.

    The bytes are first written to a hidden sibling of *destination* and
    then renamed onto it, so *destination* is either the previous file or
    the complete new one, even when *source* lives on another filesystem.
    """
    destination = Path(destination)
    destination.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{destination.name}.", suffix=".part",
                                    dir=str(destination.parent))
    os.close(fd)
    try:
        shutil.copyfile(source, tmp_name)
        os.replace(tmp_name, destination)
    except Exception:
        logger.debug("I/O FAIL: replace %s -> %s", source, destination, exc_info=True)
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        raise
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("I/O: replaced %s -> %s", source, destination)
    return destination
