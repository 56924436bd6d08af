"""Local text extraction for uploaded files.

Used by gateways that keep uploads on disk: PDFs are read with pypdf,
Word documents with python-docx, plain text and markdown are decoded.
Images and legacy ``.doc`` files have no local extractor.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

from docx import Document as DocxDocument
from loguru import logger
from pypdf import PdfReader


class UnsupportedFileError(ValueError):
    """No local extractor handles this file type."""


class BaseTextExtractor(ABC):
    """Turns one file into plain text."""

    @abstractmethod
    def extract(self, path: Path) -> str:
        pass


class PdfTextExtractor(BaseTextExtractor):
    """Extract text from every page of a PDF with pypdf."""

    def extract(self, path: Path) -> str:
        try:
            reader = PdfReader(str(path))
        except Exception as e:
            raise ValueError(f"Invalid PDF file: {e}") from e

        pages = []
        for page_num, page in enumerate(reader.pages):
            try:
                text = page.extract_text()
            except Exception as e:
                logger.warning(f"Failed to extract page {page_num} of {path.name}: {e}")
                continue
            if text and text.strip():
                pages.append(text)

        content = "\n".join(pages)
        logger.info(f"Parsed PDF: {len(reader.pages)} pages, {len(content)} characters extracted")
        return content


class DocxTextExtractor(BaseTextExtractor):
    """Extract paragraphs and tables from a DOCX file with python-docx."""

    def extract(self, path: Path) -> str:
        try:
            doc = DocxDocument(str(path))
        except Exception as e:
            raise ValueError(f"Invalid DOCX file: {e}") from e

        parts = [p.text for p in doc.paragraphs if p.text.strip()]
        for table in doc.tables:
            rows = [" | ".join(cell.text.strip() for cell in row.cells) for row in table.rows]
            if rows:
                parts.append("\n".join(rows))

        content = "\n".join(parts)
        logger.info(f"Parsed DOCX: {len(doc.paragraphs)} paragraphs, {len(content)} characters")
        return content


class PlainTextExtractor(BaseTextExtractor):

    def extract(self, path: Path) -> str:
        return path.read_bytes().decode("utf-8", errors="replace")


IMAGE_EXTENSIONS = frozenset({".png", ".jpg", ".jpeg"})

_EXTRACTORS: dict[str, BaseTextExtractor] = {
    ".pdf": PdfTextExtractor(),
    ".docx": DocxTextExtractor(),
    ".txt": PlainTextExtractor(),
    ".md": PlainTextExtractor(),
}


def supports(path: Path) -> bool:
    return path.suffix.lower() in _EXTRACTORS


def extract_text(path: Path) -> str:
    """
    Extract the text of a local file.

    Raises:
        FileNotFoundError: the file does not exist
        UnsupportedFileError: no extractor for this extension
        ValueError: the file is corrupt
    """
    if not path.is_file():
        raise FileNotFoundError(f"File not found: {path}")

    extractor = _EXTRACTORS.get(path.suffix.lower())
    if extractor is None:
        raise UnsupportedFileError(f"No text extractor for '{path.suffix}' files")

    logger.debug(f"Extracting text from {path.name} with {type(extractor).__name__}")
    return extractor.extract(path)
