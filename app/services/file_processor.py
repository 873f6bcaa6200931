"""
Text extraction for uploaded study documents.
Supports: PDF, Word (.docx), PowerPoint (.pptx) and plain text files.
"""

import codecs
import io
from pathlib import Path

import PyPDF2
from docx import Document as WordDocument
from pptx import Presentation

from app.core.logging_config import get_logger

logger = get_logger(__name__)

PDF_EXTENSIONS = {".pdf"}
WORD_EXTENSIONS = {".docx"}
SLIDE_EXTENSIONS = {".pptx"}
TEXT_EXTENSIONS = {".txt", ".md", ".csv", ".rtf"}
SUPPORTED_EXTENSIONS = PDF_EXTENSIONS | WORD_EXTENSIONS | SLIDE_EXTENSIONS | TEXT_EXTENSIONS

TEXT_ENCODINGS = ("utf-8", "utf-16", "cp1252", "latin-1")
UTF16_BOMS = (codecs.BOM_UTF16_LE, codecs.BOM_UTF16_BE)


class FileProcessingError(Exception):
    """Raised when a file cannot be turned into text."""
    pass


def extract_text_from_pdf(file_content: bytes) -> str:
    try:
        pdf_reader = PyPDF2.PdfReader(io.BytesIO(file_content))
        pages = [page.extract_text() or "" for page in pdf_reader.pages]
        logger.debug(f"Extracted text from PDF | pages={len(pages)}")
        return "\n\n".join(p for p in pages if p.strip())
    except Exception as e:
        logger.error(f"PDF extraction failed: {str(e)}")
        raise FileProcessingError(f"Failed to extract text from PDF: {str(e)}")


def extract_text_from_docx(file_content: bytes) -> str:
    """Paragraphs first, then table rows joined with pipes."""
    try:
        doc = WordDocument(io.BytesIO(file_content))
        parts = [p.text for p in doc.paragraphs if p.text.strip()]
        for table in doc.tables:
            for row in table.rows:
                cells = [cell.text.strip() for cell in row.cells if cell.text.strip()]
                if cells:
                    parts.append(" | ".join(cells))
        return "\n\n".join(parts)
    except Exception as e:
        raise FileProcessingError(f"Failed to extract text from Word document: {str(e)}")


def extract_text_from_pptx(file_content: bytes) -> str:
    """One block per slide; each shape's text on its own line."""
    try:
        prs = Presentation(io.BytesIO(file_content))
        slides = []
        for slide in prs.slides:
            lines = [shape.text for shape in slide.shapes if getattr(shape, "text", "").strip()]
            if lines:
                slides.append("\n".join(lines))
        return "\n\n".join(slides)
    except Exception as e:
        raise FileProcessingError(f"Failed to extract text from PowerPoint: {str(e)}")


def decode_text(file_content: bytes) -> str:
    for encoding in TEXT_ENCODINGS:
        # BOM-less UTF-16 "decodes" nearly any even-length input
        if encoding == "utf-16" and not file_content.startswith(UTF16_BOMS):
            continue
        try:
            return file_content.decode(encoding)
        except UnicodeDecodeError:
            continue
    raise FileProcessingError("Unable to decode text file with any supported encoding")


def detect_format(filename: str, mime_hint: str = "") -> str:
    """Pick pdf, docx, pptx or text from the MIME hint, then the extension."""
    mime = (mime_hint or "").lower()
    ext = Path(filename or "").suffix.lower()

    if "pdf" in mime or ext in PDF_EXTENSIONS:
        return "pdf"
    if "wordprocessingml" in mime or ext in WORD_EXTENSIONS:
        return "docx"
    if "presentationml" in mime or ext in SLIDE_EXTENSIONS:
        return "pptx"
    if mime.startswith("text/") or ext in TEXT_EXTENSIONS:
        return "text"
    raise FileProcessingError(
        f"Unsupported file type: {ext or mime or 'unknown'}. "
        f"Supported: {', '.join(sorted(SUPPORTED_EXTENSIONS))}"
    )


def extract_text(file_content: bytes, filename: str, mime_hint: str = "") -> str:
    """
    Extract text content from an uploaded file.

    Args:
        file_content: Raw bytes of the file
        filename: Original filename
        mime_hint: Content type reported by the client, may be empty

    Returns:
        Extracted text, with NUL characters removed

    Raises:
        FileProcessingError: If the file cannot be processed
    """
    fmt = detect_format(filename, mime_hint)
    logger.info(f"Extracting text | file={filename} | format={fmt} | bytes={len(file_content)}")

    if fmt == "pdf":
        text = extract_text_from_pdf(file_content)
    elif fmt == "docx":
        text = extract_text_from_docx(file_content)
    elif fmt == "pptx":
        text = extract_text_from_pptx(file_content)
    else:
        text = decode_text(file_content)
    return text.replace("\x00", "")


def get_supported_formats(max_upload_mb: int) -> dict:
    return {
        "documents": sorted(PDF_EXTENSIONS | WORD_EXTENSIONS | TEXT_EXTENSIONS),
        "presentations": sorted(SLIDE_EXTENSIONS),
        "max_file_size_mb": max_upload_mb,
    }
