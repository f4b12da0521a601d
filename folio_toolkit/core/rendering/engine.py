from __future__ import annotations

"""XSLT template engine used to render every file of the package.

Templates are XSLT stylesheets named ``<template name>.xslt``. They are
looked up in the user template directories first and in the built-in
``templates`` folder shipped beside this module last, so a theme can
override any page type. Template variables are handed to the stylesheet as
an XML document rooted at ``<variables>`` (see :func:`build_variables_tree`).
"""

import dataclasses
import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence

from lxml import etree as ET

from folio_toolkit.core.exceptions import TemplateNotFoundError, TemplateRenderError

logger = logging.getLogger(__name__)

__all__ = [
    "BUILTIN_TEMPLATES_DIR",
    "TEMPLATE_EXTENSION",
    "RenderResult",
    "TemplateEngine",
    "build_variables_tree",
]

BUILTIN_TEMPLATES_DIR = Path(os.path.dirname(__file__)) / "templates"
TEMPLATE_EXTENSION = ".xslt"

_INVALID_NAME_CHARS = re.compile(r"[^A-Za-z0-9_.-]")


@dataclass(frozen=True)
class RenderResult:
    """Outcome of :meth:`TemplateEngine.try_render`.

    ``content`` is None only when no template file provides the name; every
    other failure is raised as :class:`TemplateRenderError`.
    """
    template_name: str
    content: Optional[bytes] = None

    @property
    def found(self) -> bool:
        return self.content is not None

    @classmethod
    def not_found(cls, template_name: str) -> "RenderResult":
        return cls(template_name=template_name)


# ---------------------------------------------------------------------------
# Variables -> XML
# ---------------------------------------------------------------------------

def _element_name(key: Any) -> str:
    name = _INVALID_NAME_CHARS.sub("_", str(key))
    if not name or not (name[0].isalpha() or name[0] == "_"):
        name = f"_{name}"
    return name


def _append_value(parent: ET._Element, value: Any) -> None:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        value = dataclasses.asdict(value)

    if isinstance(value, Mapping):
        for key, item in value.items():
            if item is None:
                continue
            child = ET.SubElement(parent, _element_name(key))
            _append_value(child, item)
    elif isinstance(value, (list, tuple)):
        for item in value:
            if item is None:
                continue
            _append_value(ET.SubElement(parent, "entry"), item)
    elif isinstance(value, bool):
        parent.text = "true" if value else "false"
    elif isinstance(value, (bytes, bytearray)):
        parent.text = bytes(value).decode("utf-8")
    else:
        parent.text = str(value)


def build_variables_tree(variables: Mapping[str, Any]) -> ET._ElementTree:
    """Convert template *variables* into the XML document templates read.

    Mappings and dataclasses become child elements named after their keys,
    sequences become repeated ``<entry>`` children, booleans are written as
    ``true``/``false`` and ``None`` values are left out.

    Example:
        ``{"item": Fragment(element="chapter", number=1), "has_custom_css": False}``
        becomes ``<variables><item><element>chapter</element><number>1</number>
        ...</item><has_custom_css>false</has_custom_css></variables>``
    """
    root = ET.Element("variables")
    _append_value(root, variables)
    return ET.ElementTree(root)


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------

class TemplateEngine:
    """Resolves, compiles and applies XSLT templates."""

    def __init__(self, search_dirs: Sequence[str | Path] = ()) -> None:
        self._search_dirs: List[Path] = [Path(d) for d in search_dirs]
        self._search_dirs.append(BUILTIN_TEMPLATES_DIR)
        self._compiled: Dict[Path, ET.XSLT] = {}

    @property
    def search_dirs(self) -> List[Path]:
        return list(self._search_dirs)

    def find_template(self, name: str) -> Optional[Path]:
        """Return the file providing template *name*, user directories first."""
        filename = f"{name}{TEMPLATE_EXTENSION}"
        for directory in self._search_dirs:
            candidate = directory / filename
            if candidate.is_file():
                return candidate
        return None

    def has_template(self, name: str) -> bool:
        return self.find_template(name) is not None

    def try_render(self, name: str, variables: Optional[Mapping[str, Any]] = None) -> RenderResult:
        """Render template *name*; a missing template is a result, not an error.

        Raises:
            TemplateRenderError: If the template exists but cannot be compiled
                or applied, or if *variables* cannot be expressed as XML
        """
        path = self.find_template(name)
        if path is None:
            logger.debug("Template: '%s' not found", name)
            return RenderResult.not_found(name)

        transform = self._compile(name, path)
        try:
            source = build_variables_tree(variables or {})
        except (ValueError, TypeError) as e:
            raise TemplateRenderError(f"Invalid template variables: {e}", name, e) from e

        try:
            result = transform(source)
        except ET.XSLTApplyError as e:
            raise TemplateRenderError(f"Transformation failed: {e}", name, e) from e

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Template: rendered '%s' from %s", name, path)
        return RenderResult(template_name=name, content=bytes(result))

    def render(self, name: str, variables: Optional[Mapping[str, Any]] = None) -> bytes:
        """Render template *name*.

        Raises:
            TemplateNotFoundError: If no directory provides the template
            TemplateRenderError: For every other rendering failure
        """
        result = self.try_render(name, variables)
        if not result.found:
            raise TemplateNotFoundError(name, self._search_dirs)
        return result.content  # type: ignore[return-value]

    def render_to_file(self, name: str, variables: Optional[Mapping[str, Any]], path: str | Path) -> Path:
        """Render template *name* and write the bytes to *path*."""
        return write_rendered(self.render(name, variables), path)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _compile(self, name: str, path: Path) -> ET.XSLT:
        transform = self._compiled.get(path)
        if transform is not None:
            return transform
        try:
            transform = ET.XSLT(ET.parse(str(path)))
        except (ET.XMLSyntaxError, ET.XSLTParseError) as e:
            logger.debug("Template: cannot compile %s: %s", path, e)
            raise TemplateRenderError(f"Invalid template {path}: {e}", name, e) from e
        self._compiled[path] = transform
        return transform


def write_rendered(content: bytes, path: str | Path) -> Path:
    """Write rendered *content* to *path* (binary, parents created)."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    try:
        with open(path, "wb") as fh:
            fh.write(content)
    except OSError:
        logger.debug("I/O FAIL: write rendered path=%s", path, exc_info=True)
        raise
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("I/O: wrote path=%s bytes=%d", path, len(content))
    return path
