"""Tests for text extraction from uploads."""

import pymupdf
import pytest

from app.services.errors import ValidationError
from app.services.text_extractor import TextExtractor


def _pdf_bytes(*pages: str) -> bytes:
    doc = pymupdf.open()
    for text in pages:
        page = doc.new_page()
        page.insert_text((72, 72), text)
    data = doc.tobytes()
    doc.close()
    return data


def test_extracts_text_from_every_pdf_page():
    text = TextExtractor().extract_text(
        _pdf_bytes("Dijkstra finds shortest paths", "Prim builds spanning trees"),
        "application/pdf",
        "graphs.pdf",
    )

    assert "Dijkstra finds shortest paths" in text
    assert "Prim builds spanning trees" in text
    assert text.index("Dijkstra") < text.index("Prim")


@pytest.mark.parametrize("mime_type", ["", "application/octet-stream"])
def test_pdf_detected_by_extension_for_generic_types(mime_type):
    text = TextExtractor().extract_text(_pdf_bytes("Heaps are trees"), mime_type, "heaps.pdf")

    assert "Heaps are trees" in text


@pytest.mark.parametrize(
    "mime_type,filename",
    [
        ("text/plain", "notes.txt"),
        ("text/markdown; charset=utf-8", "notes.md"),
        ("application/octet-stream", "notes.txt"),
        ("", "notes.md"),
    ],
)
def test_decodes_text_uploads(mime_type, filename):
    text = TextExtractor().extract_text("Entropy always increases.".encode(), mime_type, filename)

    assert text == "Entropy always increases."


def test_strips_control_characters():
    text = TextExtractor().extract_text(b"line one\x00\x07\nline two\t", "text/plain", "a.txt")

    assert text == "line one\nline two\t"


@pytest.mark.parametrize(
    "mime_type,filename",
    [
        ("image/png", "diagram.png"),
        ("application/octet-stream", "archive.zip"),
    ],
)
def test_rejects_unsupported_types(mime_type, filename):
    with pytest.raises(ValidationError):
        TextExtractor().extract_text(b"\x89PNG....", mime_type, filename)


def test_rejects_corrupt_pdf():
    with pytest.raises(ValidationError):
        TextExtractor().extract_text(b"this is not a pdf", "application/pdf", "broken.pdf")


def test_rejects_files_without_text():
    with pytest.raises(ValidationError):
        TextExtractor().extract_text(b"  \n\x00 ", "text/plain", "blank.txt")
