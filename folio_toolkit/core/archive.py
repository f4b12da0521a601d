from __future__ import annotations

"""Serialisation of the staged book into an OCF (EPUB) ZIP archive.

The container profile, not the ZIP format, requires the ``mimetype`` entry
to be the first entry of the archive and to be stored without compression;
every other entry is deflated. General-purpose ZIP tools default to
compressing everything, so both strategies below set the method explicitly.
"""

import importlib.util
import logging
import shlex
import shutil
import subprocess
import zipfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List

from folio_toolkit.core.exceptions import ArchiveError, PreconditionError

logger = logging.getLogger(__name__)

__all__ = [
    "MIMETYPE_ENTRY",
    "Archiver",
    "ZipFileArchiver",
    "ExternalZipArchiver",
    "native_zip_available",
    "select_archiver",
]

MIMETYPE_ENTRY = "mimetype"


class Archiver(ABC):
    """Strategy that turns a staged book directory into an archive file."""

    name = "unknown"

    @abstractmethod
    def create(self, source_dir: Path, archive_path: Path) -> Path:
        """Archive *source_dir* into *archive_path* and return the path.

        Raises:
            ArchiveError: If the archive cannot be produced
        """

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


def _require_mimetype(source_dir: Path) -> Path:
    marker = source_dir / MIMETYPE_ENTRY
    if not marker.is_file():
        raise PreconditionError(f"Staged book at '{source_dir}' has no '{MIMETYPE_ENTRY}' file")
    return marker


class ZipFileArchiver(Archiver):
    """In-process archiving with :mod:`zipfile` and per-entry compression."""

    name = "native"

    def __init__(self, compresslevel: int = 9) -> None:
        self.compresslevel = compresslevel

    def create(self, source_dir: Path, archive_path: Path) -> Path:
        source_dir = Path(source_dir)
        archive_path = Path(archive_path)
        marker = _require_mimetype(source_dir)

        entries: List[Path] = sorted(
            (p for p in source_dir.rglob("*") if p.is_file() and p != marker),
            key=lambda p: p.relative_to(source_dir).as_posix(),
        )
        info = zipfile.ZipInfo(MIMETYPE_ENTRY, date_time=(1980, 1, 1, 0, 0, 0))
        info.external_attr = 0o644 << 16
        # without zlib, zipfile raises RuntimeError for deflated entries
        try:
            with zipfile.ZipFile(archive_path, "w") as zf:
                zf.writestr(info, marker.read_bytes(), compress_type=zipfile.ZIP_STORED)
                for path in entries:
                    zf.write(
                        path,
                        path.relative_to(source_dir).as_posix(),
                        compress_type=zipfile.ZIP_DEFLATED,
                        compresslevel=self.compresslevel,
                    )
        except (OSError, RuntimeError, zipfile.BadZipFile) as e:
            raise ArchiveError(f"Could not write archive {archive_path}: {e}", cause=e) from e

        logger.debug("Archive: %d entries written with zipfile", len(entries) + 1)
        return archive_path


class ExternalZipArchiver(Archiver):
    """Fallback running the ``zip`` executable twice.

    Equivalent to::

        $ cd /path/to/book
        $ zip -X0 book.zip mimetype
        $ zip -rX9D book.zip . -x mimetype
    """

    name = "external"

    def __init__(self, executable: str = "zip") -> None:
        self.executable = executable

    def commands(self, archive_path: Path) -> List[List[str]]:
        archive = str(Path(archive_path).resolve())
        return [
            [self.executable, "-X0", archive, MIMETYPE_ENTRY],
            [self.executable, "-rX9D", archive, ".", "-x", MIMETYPE_ENTRY],
        ]

    def create(self, source_dir: Path, archive_path: Path) -> Path:
        source_dir = Path(source_dir)
        archive_path = Path(archive_path)
        _require_mimetype(source_dir)

        if shutil.which(self.executable) is None:
            raise ArchiveError(
                "No archiving capability available: the zlib module is missing and "
                f"the '{self.executable}' command cannot be executed."
            )

        for command in self.commands(archive_path):
            command_text = shlex.join(command)
            logger.debug("Archive: running %s (cwd=%s)", command_text, source_dir)
            try:
                completed = subprocess.run(
                    command, cwd=str(source_dir), capture_output=True, text=True, check=False
                )
            except OSError as e:
                raise ArchiveError(
                    f"'{self.executable}' command could not be started.\n\n"
                    f"Executed command:\n {command_text}\n\nResult:\n{e}",
                    command=command_text, stderr=str(e), cause=e,
                ) from e
            if completed.returncode != 0:
                raise ArchiveError(
                    f"'{self.executable}' command execution wasn't successful.\n\n"
                    f"Executed command:\n {command_text}\n\nResult:\n{completed.stderr}",
                    command=command_text, stderr=completed.stderr,
                )

        return archive_path

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(executable={self.executable!r})"


def native_zip_available() -> bool:
    """Return True when :mod:`zipfile` can write deflated entries."""
    return importlib.util.find_spec("zlib") is not None


def select_archiver(preference: str = "auto", executable: str = "zip") -> Archiver:
    """Pick the archiving strategy once, from configuration and capabilities.

    ``auto`` prefers the in-process archiver and falls back to the external
    ``zip`` command when :mod:`zlib` is unavailable.
    """
    preference = (preference or "auto").lower()
    if preference not in {"auto", "native", "external"}:
        raise ValueError(f"Unknown archiver preference: {preference!r}")

    if preference == "native" or (preference == "auto" and native_zip_available()):
        archiver: Archiver = ZipFileArchiver()
    else:
        archiver = ExternalZipArchiver(executable)
    logger.debug("Archive: using %r", archiver)
    return archiver
