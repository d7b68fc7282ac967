"""
PDF Converter
Turns uploaded .txt / .docx resumes into PDF; validates and passes .pdf through
"""
import io
from pathlib import Path
from typing import Iterable, List
from xml.sax.saxutils import escape

import docx
import pdfplumber
from loguru import logger
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import SimpleDocTemplate, Paragraph, Spacer

from core.exceptions import ConversionException
from application.services.resume import ConvertedDocument, IDocumentConverter


LEGACY_DOC_MESSAGE = (
    "Legacy .doc format is not supported. Please upload a .docx, .txt or .pdf file"
)


def pdf_filename(filename: str) -> str:
    return f"{Path(filename).stem or 'resume'}.pdf"


class PdfConverter(IDocumentConverter):
    """Document to PDF converter"""

    def __init__(self):
        styles = getSampleStyleSheet()
        self.body_style = styles["BodyText"]

    def convert(self, content: bytes, filename: str) -> ConvertedDocument:
        ext = Path(filename).suffix.lower()

        if ext == ".pdf":
            self._validate_pdf(content)
            return ConvertedDocument(content=content, filename=filename)
        if ext == ".txt":
            text = content.decode("utf-8", errors="replace")
            lines = text.replace("\r\n", "\n").split("\n")
        elif ext == ".docx":
            lines = self._docx_lines(content)
        elif ext == ".doc":
            raise ConversionException(LEGACY_DOC_MESSAGE)
        else:
            raise ConversionException(f"Unsupported file format: {ext or filename}")

        pdf_bytes = self._render(lines)
        logger.info(f"Converted {filename} to PDF ({len(pdf_bytes)} bytes)")
        return ConvertedDocument(content=pdf_bytes, filename=pdf_filename(filename))

    def _validate_pdf(self, content: bytes) -> None:
        try:
            with pdfplumber.open(io.BytesIO(content)) as pdf:
                page_count = len(pdf.pages)
        except Exception as e:
            raise ConversionException(f"Unreadable PDF file: {e}") from e
        if page_count == 0:
            raise ConversionException("PDF file has no pages")

    def _docx_lines(self, content: bytes) -> List[str]:
        try:
            document = docx.Document(io.BytesIO(content))
        except Exception as e:
            raise ConversionException(f"Unreadable .docx file: {e}") from e

        lines = [paragraph.text for paragraph in document.paragraphs]
        for table in document.tables:
            for row in table.rows:
                cells = [cell.text.strip() for cell in row.cells if cell.text.strip()]
                if cells:
                    lines.append(" | ".join(cells))
        return lines

    def _render(self, lines: Iterable[str]) -> bytes:
        buffer = io.BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=A4,
            leftMargin=0.75 * inch,
            rightMargin=0.75 * inch,
            topMargin=0.75 * inch,
            bottomMargin=0.75 * inch,
        )

        story = []
        for line in lines:
            if line.strip():
                story.append(Paragraph(escape(line), self.body_style))
            else:
                story.append(Spacer(1, 0.15 * inch))
        if not story:
            story.append(Spacer(1, 0.15 * inch))

        try:
            doc.build(story)
        except Exception as e:
            raise ConversionException(f"PDF rendering failed: {e}") from e
        return buffer.getvalue()
