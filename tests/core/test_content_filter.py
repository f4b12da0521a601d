import pytest

from folio_toolkit.core.content_filter import ALWAYS_EXCLUDED_ELEMENTS, filter_contents
from folio_toolkit.core.models import Fragment

ELEMENTS = ["cover", "dedication", "toc", "lot", "lof", "chapter", "appendix", "chapter"]


def _fragments(elements):
    return [Fragment(element=e, number=i) for i, e in enumerate(elements)]


class TestFilterContents:
    """Test cases for filter_contents."""

    @pytest.mark.parametrize("use_html_toc", [False, True])
    def test_excluded_elements_never_survive(self, use_html_toc):
        result = filter_contents(_fragments(ELEMENTS), use_html_toc)
        assert not {f.element for f in result} & ALWAYS_EXCLUDED_ELEMENTS

    def test_toc_removed_without_flag(self):
        result = filter_contents(_fragments(ELEMENTS), use_html_toc=False)
        assert [f.element for f in result] == ["dedication", "chapter", "appendix", "chapter"]

    def test_toc_kept_with_flag(self):
        result = filter_contents(_fragments(ELEMENTS), use_html_toc=True)
        assert [f.element for f in result] == ["dedication", "toc", "chapter", "appendix", "chapter"]

    def test_toc_flag_without_toc_fragment(self):
        result = filter_contents(_fragments(["chapter", "appendix"]), use_html_toc=True)
        assert [f.element for f in result] == ["chapter", "appendix"]

    def test_order_and_identity_preserved(self):
        fragments = _fragments(["chapter", "cover", "appendix"])
        result = filter_contents(fragments)
        assert result == [fragments[0], fragments[2]]
        assert result[0] is fragments[0]

    def test_empty_input(self):
        assert filter_contents([], use_html_toc=True) == []

    def test_only_excluded_elements(self):
        assert filter_contents(_fragments(["cover", "lot", "lof", "toc"])) == []
