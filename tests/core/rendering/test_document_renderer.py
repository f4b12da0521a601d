import pytest
from lxml import etree as ET

from folio_toolkit.core.exceptions import TemplateNotFoundError, TemplateRenderError
from folio_toolkit.core.models import CoverDescriptor
from folio_toolkit.core.rendering.document_renderer import DocumentRenderer
from folio_toolkit.core.rendering.engine import TemplateEngine
from folio_toolkit.core.slugs import normalize_slugs

XHTML = "{http://www.w3.org/1999/xhtml}"

CHAPTER_XSLT = """<?xml version="1.0" encoding="UTF-8"?>
<xsl:stylesheet version="1.0" xmlns:xsl="http://www.w3.org/1999/XSL/Transform">
  <xsl:output method="xml" encoding="utf-8"/>
  <xsl:template match="/">
    <chapter-page slug="{/variables/item/slug}" pages="{count(/variables/items/entry)}"/>
  </xsl:template>
</xsl:stylesheet>
"""


def _parse(path):
    return ET.parse(str(path)).getroot()


@pytest.fixture
def theme_dir(temp_dir):
    path = temp_dir / "theme"
    path.mkdir()
    return path


@pytest.fixture
def target_dir(temp_dir):
    path = temp_dir / "OEBPS"
    path.mkdir()
    return path


@pytest.fixture
def renderer_for(make_context):
    def _make(*template_dirs, engine=None, **overrides):
        context = make_context(templates_dirs=list(template_dirs), **overrides)
        return DocumentRenderer(engine or TemplateEngine(context.templates_dirs), context)
    return _make


class TestRenderItem:
    """Test cases for DocumentRenderer.render_item."""

    def test_chapter_falls_back_to_chunk(self, renderer_for, chapters, target_dir):
        items = normalize_slugs(chapters)
        path = renderer_for().render_item(items[0], items, False, target_dir)

        assert path == target_dir / "chapter-1.html"
        root = _parse(path)
        div = root.find(f".//{XHTML}div")
        assert div.get("id") == "chapter-1"
        assert div.get("class") == "item chapter"
        assert "Lorem Ipsum" in "".join(root.find(f".//{XHTML}h1").itertext())
        # fragment markup is embedded, not escaped
        assert root.find(f".//{XHTML}div/{XHTML}p").text == "Lorem ipsum."

    def test_stylesheet_links(self, renderer_for, chapters, target_dir):
        items = normalize_slugs(chapters)
        path = renderer_for().render_item(items[0], items, True, target_dir)
        hrefs = [link.get("href") for link in _parse(path).iter(f"{XHTML}link")]
        assert hrefs == ["css/book.css", "css/styles.css"]

    def test_no_default_stylesheet_link(self, renderer_for, chapters, target_dir):
        items = normalize_slugs(chapters)
        path = renderer_for(include_styles=False).render_item(items[0], items, False, target_dir)
        assert list(_parse(path).iter(f"{XHTML}link")) == []

    def test_custom_element_template_used(self, renderer_for, chapters, theme_dir, target_dir):
        (theme_dir / "chapter.xslt").write_text(CHAPTER_XSLT, encoding="utf-8")
        items = normalize_slugs(chapters)

        path = renderer_for(theme_dir).render_item(items[1], items, False, target_dir)

        root = _parse(path)
        assert root.tag == "chapter-page"
        assert root.get("slug") == "chapter-2"
        assert root.get("pages") == "3"

    def test_toc_uses_toc_template(self, renderer_for, chapters, target_dir):
        items = normalize_slugs(chapters)
        path = renderer_for().render_item(items[2], items, False, target_dir)

        assert path.name == "toc.html"
        hrefs = [a.get("href") for a in _parse(path).iter(f"{XHTML}a")]
        assert hrefs == ["chapter-1.html", "chapter-1.html#dolor", "chapter-2.html"]

    def test_toc_respects_depth(self, renderer_for, chapters, target_dir):
        items = normalize_slugs(chapters)
        path = renderer_for(toc_depth=1).render_item(items[2], items, False, target_dir)
        hrefs = [a.get("href") for a in _parse(path).iter(f"{XHTML}a")]
        assert hrefs == ["chapter-1.html", "chapter-2.html"]

    def test_broken_element_template_not_masked(self, renderer_for, chapters, theme_dir, target_dir):
        (theme_dir / "chapter.xslt").write_text("<not-closed>", encoding="utf-8")
        items = normalize_slugs(chapters)

        with pytest.raises(TemplateRenderError):
            renderer_for(theme_dir).render_item(items[0], items, False, target_dir)
        assert not (target_dir / "chapter-1.html").exists()

    def test_missing_chunk_raises(self, renderer_for, chapters, temp_dir, target_dir):
        engine = TemplateEngine()
        # an engine whose only directory lacks every page template
        empty = temp_dir / "empty"
        empty.mkdir()
        engine._search_dirs = [empty]
        items = normalize_slugs(chapters)

        with pytest.raises(TemplateNotFoundError) as exc_info:
            renderer_for(engine=engine).render_item(items[0], items, False, target_dir)
        assert exc_info.value.template_name == "chunk"

    def test_render_items_writes_every_page(self, renderer_for, chapters, target_dir):
        items = normalize_slugs(chapters)
        paths = renderer_for().render_items(items, False, target_dir)
        assert [p.name for p in paths] == ["chapter-1.html", "chapter-2.html", "toc.html"]


class TestFixedFiles:
    """Test cases for the cover page, stylesheet and container files."""

    def test_cover_page_without_cover(self, renderer_for, target_dir):
        root = _parse(renderer_for().render_cover_page(None, False, target_dir))
        assert root.find(f".//{XHTML}img") is None
        assert root.find(f".//{XHTML}h1").text == "The Packaged Book"
        assert root.find(f".//{XHTML}p").text == "Jane Doe"

    def test_cover_page_with_cover(self, renderer_for, target_dir):
        cover = CoverDescriptor(id="cover-image", file_path="images/cover.png",
                                media_type="image/png", width=600, height=800)
        path = renderer_for().render_cover_page(cover, False, target_dir)

        assert path.name == "titlepage.html"
        img = _parse(path).find(f".//{XHTML}img")
        assert img.get("src") == "images/cover.png"
        assert (img.get("width"), img.get("height")) == ("600", "800")

    def test_stylesheet(self, renderer_for, target_dir):
        path = renderer_for().render_stylesheet(target_dir)
        assert path == target_dir / "css" / "book.css"
        assert path.read_text(encoding="utf-8").strip()

    def test_container_and_mimetype(self, renderer_for, temp_dir):
        renderer = renderer_for()
        container = renderer.render_container(temp_dir / "META-INF")
        mimetype = renderer.render_mimetype(temp_dir)
        assert container.name == "container.xml"
        assert mimetype.read_bytes() == b"application/epub+zip"

