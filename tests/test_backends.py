"""Tests for page operation backends."""

import json
import pytest
import pymupdf

from pdfpages.backends.document_info import DocumentInfoBackend
from pdfpages.backends.page_selection import PageSelectionBackend
from pdfpages.ranges.errors import ExpandError, ParseError


def create_test_pdf(count=3):
    """Create a PDF whose page N reads "Content of page N"."""
    doc = pymupdf.open()
    for n in range(1, count + 1):
        page = doc.new_page(width=612, height=792)
        page.insert_text(pymupdf.Point(72, 72), f"Content of page {n}", fontsize=12, fontname="helv")
    pdf_bytes = doc.tobytes()
    doc.close()
    return pdf_bytes


def page_texts(pdf_bytes):
    doc = pymupdf.open(stream=pdf_bytes, filetype="pdf")
    texts = [page.get_text("text").strip() for page in doc]
    rotations = [page.rotation for page in doc]
    doc.close()
    return texts, rotations


# --- Backend Support Tests ---

class TestBackendSupport:
    """Tests for backend operation support."""

    def test_page_selection_supports(self):
        backend = PageSelectionBackend()
        assert backend.supports("select")
        assert backend.supports("extract_text")
        assert not backend.supports("grep")

    def test_document_info_supports(self):
        backend = DocumentInfoBackend()
        assert backend.supports("page_count")
        assert backend.supports("page_labels")
        assert backend.supports("grep")
        assert not backend.supports("select")

    def test_unsupported_operation_raises(self):
        with pytest.raises(ValueError):
            PageSelectionBackend().process(create_test_pdf(), "grep", {})


# --- Page Selection Tests ---

class TestPageSelectionBackend:
    """Tests for PageSelectionBackend with real PDFs."""

    def setup_method(self):
        self.backend = PageSelectionBackend()

    def test_select_reorders_and_rotates(self):
        output, fmt, metadata = self.backend.process(
            create_test_pdf(3), "select", {"pages": "3,1-2R"}
        )

        assert fmt == "pdf"
        texts, rotations = page_texts(output)
        assert texts == ["Content of page 3", "Content of page 1", "Content of page 2"]
        assert rotations == [0, 90, 90]

    def test_select_metadata(self):
        output, fmt, metadata = self.backend.process(
            create_test_pdf(3), "select", {"pages": "1-end,1F"}
        )

        assert metadata["source_pages"] == "3"
        assert metadata["output_pages"] == "4"
        assert metadata["rotated_pages"] == "1"

    def test_select_requires_pages(self):
        with pytest.raises(ValueError):
            self.backend.process(create_test_pdf(), "select", {})

    def test_select_out_of_range(self):
        with pytest.raises(ExpandError) as exc_info:
            self.backend.process(create_test_pdf(3), "select", {"pages": "2-5"})
        assert exc_info.value.requested == 5
        assert exc_info.value.max_page == 3

    def test_select_parse_error(self):
        with pytest.raises(ParseError):
            self.backend.process(create_test_pdf(3), "select", {"pages": "1-2Q"})

    def test_invalid_pdf(self):
        with pytest.raises(ValueError, match="Invalid or corrupted PDF file"):
            self.backend.process(b"not a pdf", "select", {"pages": "1"})

    def test_extract_text(self):
        output, fmt, metadata = self.backend.process(
            create_test_pdf(3), "extract_text", {"pages": "3-2"}
        )

        assert fmt == "json"
        result = json.loads(output)
        assert result["total_pages"] == 3
        assert result["pages_selected"] == 2
        assert [p["page"] for p in result["pages"]] == [3, 2]
        assert "Content of page 3" in result["full_text"]
        assert metadata["pages_processed"] == "2"

    def test_extract_text_defaults_to_all_pages(self):
        output, fmt, metadata = self.backend.process(create_test_pdf(3), "extract_text", {})

        result = json.loads(output)
        assert [p["page"] for p in result["pages"]] == [1, 2, 3]


# --- Document Info Tests ---

class TestDocumentInfoBackend:
    """Tests for DocumentInfoBackend."""

    def setup_method(self):
        self.backend = DocumentInfoBackend()

    def test_page_count(self):
        output, fmt, metadata = self.backend.process(create_test_pdf(4), "page_count", {})

        assert fmt == "json"
        assert json.loads(output) == {"total_pages": 4}
        assert metadata["total_pages"] == "4"

    def test_page_labels_empty(self):
        output, fmt, metadata = self.backend.process(create_test_pdf(2), "page_labels", {})

        result = json.loads(output)
        assert result["labels"] == {}
        assert metadata["labelled_pages"] == "0"

    def test_grep(self):
        output, fmt, metadata = self.backend.process(
            create_test_pdf(3), "grep", {"pattern": r"page [23]"}
        )

        result = json.loads(output)
        assert result["total_matches"] == 2
        assert result["pages_with_matches"] == [2, 3]
        assert result["truncated"] is False

    def test_grep_ignore_case_and_limit(self):
        output, fmt, metadata = self.backend.process(
            create_test_pdf(3), "grep",
            {"pattern": "CONTENT", "ignore_case": "true", "max_results": "2"},
        )

        result = json.loads(output)
        assert result["total_matches"] == 2
        assert result["truncated"] is True

    def test_grep_exact_limit_not_truncated(self):
        """Hitting the limit with no further matches is not truncation."""
        output, fmt, metadata = self.backend.process(
            create_test_pdf(3), "grep", {"pattern": "Content", "max_results": "3"}
        )

        result = json.loads(output)
        assert result["total_matches"] == 3
        assert result["truncated"] is False

    def test_grep_zero_limit(self):
        output, fmt, metadata = self.backend.process(
            create_test_pdf(3), "grep", {"pattern": "Content", "max_results": "0"}
        )

        result = json.loads(output)
        assert result["matches"] == []
        assert result["truncated"] is True

    def test_grep_zero_limit_without_matches(self):
        output, fmt, metadata = self.backend.process(
            create_test_pdf(3), "grep", {"pattern": "Appendix", "max_results": "0"}
        )

        assert json.loads(output)["truncated"] is False

    def test_grep_requires_pattern(self):
        with pytest.raises(ValueError):
            self.backend.process(create_test_pdf(), "grep", {})

    def test_grep_invalid_pattern(self):
        with pytest.raises(ValueError):
            self.backend.process(create_test_pdf(), "grep", {"pattern": "("})

    def test_grep_invalid_max_results(self):
        with pytest.raises(ValueError):
            self.backend.process(create_test_pdf(), "grep", {"pattern": "x", "max_results": "lots"})
