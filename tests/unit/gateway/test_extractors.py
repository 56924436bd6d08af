"""Tests for local text extractors."""

import pytest
from docx import Document as DocxDocument
from pypdf import PdfWriter

from studymate.gateway.extractors import UnsupportedFileError, extract_text, supports


class TestExtractText:
    """Tests for extract_text."""

    def test_plain_text(self, temp_file):
        assert extract_text(temp_file) == "Sample content for testing"

    def test_docx_paragraphs_and_tables(self, temp_dir):
        path = temp_dir / "notes.docx"
        doc = DocxDocument()
        doc.add_paragraph("Chapter 1: Cells")
        doc.add_paragraph("   ")
        table = doc.add_table(rows=1, cols=2)
        table.rows[0].cells[0].text = "Organelle"
        table.rows[0].cells[1].text = "Function"
        doc.save(str(path))

        text = extract_text(path)

        assert text == "Chapter 1: Cells\nOrganelle | Function"

    def test_pdf_without_text(self, temp_dir):
        path = temp_dir / "blank.pdf"
        writer = PdfWriter()
        writer.add_blank_page(width=200, height=200)
        with open(path, "wb") as f:
            writer.write(f)

        assert extract_text(path) == ""

    def test_corrupt_pdf(self, temp_dir):
        path = temp_dir / "broken.pdf"
        path.write_bytes(b"not a pdf")

        with pytest.raises(ValueError):
            extract_text(path)

    def test_missing_file(self, temp_dir):
        with pytest.raises(FileNotFoundError):
            extract_text(temp_dir / "missing.txt")

    def test_image_unsupported(self, temp_dir):
        path = temp_dir / "scan.jpg"
        path.write_bytes(b"\xff\xd8")

        with pytest.raises(UnsupportedFileError):
            extract_text(path)
        assert not supports(path)


@pytest.fixture
def temp_file(temp_dir):
    file_path = temp_dir / "test_file.txt"
    file_path.write_text("Sample content for testing")
    return file_path
