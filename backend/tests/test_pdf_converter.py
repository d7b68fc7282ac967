"""
Tests for document to PDF conversion
"""
import io

import docx
import pdfplumber
import pytest
from reportlab.pdfgen import canvas

from core.exceptions import ConversionException
from infrastructure.external.pdf_converter import PdfConverter, pdf_filename


def _pdf_text(content: bytes) -> str:
    with pdfplumber.open(io.BytesIO(content)) as pdf:
        return "\n".join(page.extract_text() or "" for page in pdf.pages)


@pytest.fixture
def converter():
    return PdfConverter()


def test_pdf_filename():
    assert pdf_filename("Ana CV.docx") == "Ana CV.pdf"
    assert pdf_filename("resume.txt") == "resume.pdf"


def test_txt_is_rendered(converter):
    result = converter.convert(b"Ana Perez\n\nSenior Engineer <Python & SQL>", "cv.txt")

    assert result.filename == "cv.pdf"
    assert result.content.startswith(b"%PDF")
    text = _pdf_text(result.content)
    assert "Ana Perez" in text
    assert "Python & SQL" in text


def test_docx_is_rendered(converter):
    document = docx.Document()
    document.add_paragraph("Ana Perez")
    document.add_paragraph("Team Lead at Acme")
    table = document.add_table(rows=1, cols=2)
    table.rows[0].cells[0].text = "Skills"
    table.rows[0].cells[1].text = "Python"
    buffer = io.BytesIO()
    document.save(buffer)

    result = converter.convert(buffer.getvalue(), "cv.docx")

    assert result.filename == "cv.pdf"
    text = _pdf_text(result.content)
    assert "Team Lead at Acme" in text
    assert "Skills" in text and "Python" in text


def test_pdf_is_passed_through(converter):
    buffer = io.BytesIO()
    c = canvas.Canvas(buffer)
    c.drawString(72, 720, "Existing PDF resume")
    c.save()
    content = buffer.getvalue()

    result = converter.convert(content, "resume.pdf")

    assert result.content == content
    assert result.filename == "resume.pdf"


def test_corrupt_pdf_is_rejected(converter):
    with pytest.raises(ConversionException):
        converter.convert(b"not really a pdf", "resume.pdf")


def test_corrupt_docx_is_rejected(converter):
    with pytest.raises(ConversionException):
        converter.convert(b"not a zip archive", "resume.docx")


def test_legacy_doc_is_rejected(converter):
    with pytest.raises(ConversionException) as exc_info:
        converter.convert(b"\xd0\xcf\x11\xe0", "resume.doc")
    assert ".doc" in str(exc_info.value)


def test_unknown_extension_is_rejected(converter):
    with pytest.raises(ConversionException):
        converter.convert(b"data", "resume.odt")
