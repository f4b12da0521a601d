"""Test configuration and fixtures for Folio Toolkit.

This module provides shared fixtures for the packaging pipeline tests:
temporary directories, sample fragments, a sample book tree with images and
an isolated configuration directory. All test files should use the fixtures
defined here for consistency.
"""

import logging
import shutil
import sys
import tempfile
from pathlib import Path

import pytest
from PIL import Image

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from folio_toolkit.config import ConfigManager
from folio_toolkit.core.context import PublishingContext
from folio_toolkit.core.models import BookMetadata, Fragment, TocEntry

# Configure test logging
logging.basicConfig(
    level=logging.DEBUG,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)


def make_image(path: Path, size=(10, 10), fmt="PNG") -> Path:
    """Write a solid-colour image of *size* to *path*."""
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.new("RGB", size, color=(200, 30, 30)).save(path, format=fmt)
    return path


def make_fragment(element: str, number=None, title: str = "", content: str = "<p>Lorem ipsum.</p>",
                  extra_toc=()) -> Fragment:
    """Build a fragment whose toc[0] carries an author-style slug."""
    label = f"{element.title()} {number}" if number is not None else ""
    toc = [TocEntry(level=1, title=title, label=label, slug=f"author-{title or element}".lower())]
    toc.extend(extra_toc)
    return Fragment(
        element=element,
        number=number,
        title=title,
        label=label,
        content=content,
        toc=toc,
        slug=f"author-{title or element}".lower().replace(" ", "-"),
    )


@pytest.fixture
def temp_dir():
    """Creates a temporary directory for test operations."""
    temp_path = Path(tempfile.mkdtemp())
    yield temp_path
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Point user overrides at an empty directory and reload config per test."""
    config_dir = tmp_path / "user-config"
    config_dir.mkdir()
    monkeypatch.setenv("FOLIO_CONFIG_DIR", str(config_dir))
    ConfigManager.reset()
    yield config_dir
    ConfigManager.reset()


@pytest.fixture
def book():
    return BookMetadata(title="The Packaged Book", author="Jane Doe", language="en",
                        identifier="urn:uuid:00000000-0000-0000-0000-000000000001")


@pytest.fixture
def chapters():
    """Two chapters and a toc fragment, as in the reference scenarios."""
    return [
        make_fragment("chapter", 1, "Lorem Ipsum",
                      extra_toc=[TocEntry(level=2, title="Dolor", slug="dolor")]),
        make_fragment("chapter", 2, "Sit Amet"),
        make_fragment("toc", title="Contents", content=""),
    ]


@pytest.fixture
def book_dir(temp_dir):
    """Book source directory with an empty images folder."""
    path = temp_dir / "book"
    (path / "images").mkdir(parents=True)
    return path


@pytest.fixture
def make_context(book, chapters, book_dir, temp_dir):
    """Factory building a PublishingContext around the sample book."""
    def _make(**overrides):
        options = {
            "cache_dir": temp_dir / "cache",
            "archiver": "native",
        }
        options.update(overrides)
        contents = options.pop("contents", chapters)
        return PublishingContext(
            book=book,
            contents=contents,
            contents_dir=book_dir,
            output_dir=temp_dir / "output",
            **options,
        )
    return _make
