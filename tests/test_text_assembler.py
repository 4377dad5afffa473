"""Tests for text assembler."""

from pdfpages.converters.text_assembler import TextAssembler
from pdfpages.document.text import GrepMatch, PageText


class TestTextAssembler:
    """Tests for TextAssembler."""

    def setup_method(self):
        self.assembler = TextAssembler()

    def test_assemble_pages(self):
        pages = [
            PageText(page=2, text="Second\n"),
            PageText(page=1, text="First\n", rotation=90),
        ]
        result = self.assembler.assemble_pages(pages, total_pages=5)

        assert result["total_pages"] == 5
        assert result["pages_selected"] == 2
        assert result["pages"][1] == {"page": 1, "text": "First\n", "rotation": 90}
        assert result["full_text"] == "Second\nFirst"

    def test_assemble_pages_keeps_repeats(self):
        pages = [PageText(page=1, text="A"), PageText(page=1, text="A")]
        result = self.assembler.assemble_pages(pages, total_pages=1)

        assert result["pages_selected"] == 2
        assert result["full_text"] == "A\nA"

    def test_assemble_empty(self):
        result = self.assembler.assemble_pages([], total_pages=0)

        assert result["pages"] == []
        assert result["full_text"] == ""

    def test_assemble_matches(self):
        matches = [
            GrepMatch(page=3, line_number=1, text="foo bar", match_start=0, match_end=3),
            GrepMatch(page=1, line_number=4, text="a foo", match_start=2, match_end=5),
        ]
        result = self.assembler.assemble_matches(matches, "foo")

        assert result["pattern"] == "foo"
        assert result["total_matches"] == 2
        assert result["truncated"] is False
        assert result["pages_with_matches"] == [1, 3]
        assert result["matches"][0]["match_end"] == 3

    def test_assemble_matches_truncated(self):
        matches = [GrepMatch(page=1, line_number=1, text="foo", match_start=0, match_end=3)]
        result = self.assembler.assemble_matches(matches, "foo", truncated=True)

        assert result["truncated"] is True
