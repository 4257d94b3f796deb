"""
Tests for DocumentTextExtractor.
"""

import pytest
from pypdf import PdfWriter
from pypdf.errors import DependencyError

from docindex.infrastructure.text_extractor import DocumentTextExtractor, ExtractionError
from tests.indexing_test_utils import write_file


def test_reads_utf8(tmp_path):
    path = write_file(tmp_path, "guide.md", "# Título\n\nCafé ☕")
    assert DocumentTextExtractor().extract(path) == "# Título\n\nCafé ☕"


def test_invalid_utf8(tmp_path):
    path = tmp_path / "latin1.txt"
    path.write_bytes("caf\xe9".encode("latin-1"))
    with pytest.raises(ExtractionError):
        DocumentTextExtractor().extract(path)


def test_missing_file(tmp_path):
    with pytest.raises(ExtractionError):
        DocumentTextExtractor().extract(tmp_path / "gone.md")


def test_size_limit(tmp_path):
    path = write_file(tmp_path, "big.md", "x")
    with pytest.raises(ExtractionError, match="limit"):
        DocumentTextExtractor(max_file_size_mb=0).extract(path)


def test_corrupt_pdf(tmp_path):
    path = tmp_path / "broken.pdf"
    path.write_bytes(b"this is not a pdf")
    with pytest.raises(ExtractionError):
        DocumentTextExtractor().extract(path)


def test_blank_pdf_has_no_text(tmp_path):
    path = tmp_path / "blank.pdf"
    writer = PdfWriter()
    writer.add_blank_page(width=200, height=200)
    with open(path, "wb") as f:
        writer.write(f)

    assert DocumentTextExtractor().extract(path) == ""


def test_pdf_needing_missing_dependency(tmp_path, monkeypatch):
    def encrypted_reader(path):
        raise DependencyError("cryptography>=3.1 is required for AES algorithm")

    monkeypatch.setattr("docindex.infrastructure.text_extractor.PdfReader", encrypted_reader)
    path = tmp_path / "locked.pdf"
    path.write_bytes(b"%PDF-1.7\n")

    with pytest.raises(ExtractionError, match="AES"):
        DocumentTextExtractor().extract(path)
