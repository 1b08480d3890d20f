# grantaxiom/memory_bank/ingest.py

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

from grantaxiom.core.config import config
from grantaxiom.core.models import Reference

TEXT_SUFFIXES = {".txt", ".md"}
TEXT_CONTENT_TYPES = {"text/plain", "text/markdown"}
PDF_CONTENT_TYPES = {"application/pdf", "application/x-pdf"}
UPLOADED_AUTHORS = "Uploaded Document"


def load_pdf_pages(content: bytes) -> List[str]:
    """Extracts per-page text from PDF bytes. Requires pymupdf."""
    try:
        import fitz  # pymupdf
    except ImportError as exc:
        raise ImportError("Install pymupdf: pip install pymupdf") from exc

    pages: List[str] = []
    with fitz.open(stream=content, filetype="pdf") as doc:
        for page in doc:
            pages.append(page.get_text() or "")
    return pages


def truncate_snippet(text: str, limit: Optional[int] = None) -> str:
    limit = config.workbench.snippet_chars if limit is None else limit
    return text[:limit] + ("..." if len(text) > limit else "")


def placeholder_snippet(filename: str, size_bytes: int) -> str:
    return f"Document uploaded: {filename}. Size: {size_bytes / 1024:.1f}KB. (Content extraction unavailable)"


def _is_text_upload(filename: str, content_type: str) -> bool:
    return Path(filename).suffix.lower() in TEXT_SUFFIXES or content_type in TEXT_CONTENT_TYPES


def _is_pdf_upload(filename: str, content_type: str) -> bool:
    return Path(filename).suffix.lower() == ".pdf" or content_type in PDF_CONTENT_TYPES


def extract_snippet(filename: str, content: bytes, content_type: str = "") -> str:
    content_type = (content_type or "").split(";")[0].strip().lower()
    if _is_text_upload(filename, content_type):
        return truncate_snippet(content.decode("utf-8", errors="replace"))
    if _is_pdf_upload(filename, content_type):
        text = " ".join(p.strip() for p in load_pdf_pages(content) if p.strip())
        if text:
            return truncate_snippet(text)
    return placeholder_snippet(filename, len(content))


def reference_from_upload(filename: str, content: bytes, content_type: str = "") -> Reference:
    """Builds a Reference from an uploaded document."""
    name = (filename or "").strip() or "untitled"
    return Reference(
        id=f"local-{uuid.uuid4().hex}",
        title=name,
        authors=UPLOADED_AUTHORS,
        year=datetime.now(timezone.utc).year,
        content_snippet=extract_snippet(name, content, content_type),
    )


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Preview the reference GrantAxiom builds from a document")
    parser.add_argument("path", help="Document path (.txt, .md or .pdf)")
    args = parser.parse_args()

    path = Path(args.path)
    print(reference_from_upload(path.name, path.read_bytes()).model_dump_json(by_alias=True, indent=2))
