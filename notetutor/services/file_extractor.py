"""Note text extraction from uploaded files (PDF via PyMuPDF, Word via python-docx)."""

import io
import re
from dataclasses import dataclass
from pathlib import PurePath

import docx
import pymupdf  # PyMuPDF

from notetutor.errors import InvalidRequest

# Control characters that Postgres TEXT/VARCHAR cannot store (NUL, etc.)
_ILLEGAL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f]")

SUPPORTED_EXTENSIONS = (".pdf", ".docx", ".txt", ".md")


@dataclass
class ExtractedNote:
    """Prefill for the note form: title from the file name, content from the file."""

    title: str
    content: str


class FileExtractor:
    """Service for turning uploaded study files into note text."""

    @staticmethod
    def extract_pdf(pdf_bytes: bytes) -> str:
        doc = pymupdf.open(stream=pdf_bytes, filetype="pdf")
        try:
            # Combine all pages with double newline separator
            return "\n\n".join(page.get_text() for page in doc)
        finally:
            doc.close()

    @staticmethod
    def extract_docx(docx_bytes: bytes) -> str:
        document = docx.Document(io.BytesIO(docx_bytes))
        paragraphs = [(p.text or "").strip() for p in document.paragraphs]
        return "\n".join(p for p in paragraphs if p)

    @staticmethod
    def extract_plain(data: bytes) -> str:
        return data.decode("utf-8", errors="replace")

    def extract(self, filename: str, data: bytes) -> ExtractedNote:
        """
        Extract note text from an uploaded file.

        Raises InvalidRequest for unsupported types, unreadable files,
        or files with no extractable text.
        """
        path = PurePath(filename or "")
        suffix = path.suffix.lower()
        if suffix not in SUPPORTED_EXTENSIONS:
            raise InvalidRequest(
                "Unsupported file type. "
                "Please upload a PDF, Word (.docx), text (.txt) or Markdown (.md) file."
            )

        try:
            if suffix == ".pdf":
                text = self.extract_pdf(data)
            elif suffix == ".docx":
                text = self.extract_docx(data)
            else:
                text = self.extract_plain(data)
        except Exception as e:
            raise InvalidRequest(
                f"Failed to parse {path.name}.", detail=f"{type(e).__name__}: {e}"
            ) from e

        # Strip NUL bytes and other control chars that Postgres rejects
        text = _ILLEGAL_CHARS.sub("", text).strip()
        if not text:
            raise InvalidRequest(f"No text could be extracted from {path.name}.")

        return ExtractedNote(title=path.stem or "Untitled", content=text)


# Stateless, shared by the notes routes
file_extractor = FileExtractor()
