"""
Chat attachment preprocessing.

Turns an uploaded file into a payload the orchestrator can attach to a
conversation turn:

    application/pdf  →  DocumentPayload (extracted text + page count)
    image/*          →  ImagePayload    (base64 data URL, original MIME type)
    anything else    →  UnsupportedFileTypeError

A PDF that cannot be parsed aborts the request; there is no partial
extraction. No size cap is applied here (the upload endpoint enforces one).

Usage:
    payload = await process_file(FileDescriptor(mime_type="image/png", path="/tmp/x.png"))
"""

import asyncio
import base64
from pathlib import Path

import structlog
from pypdf import PdfReader

from eventav.models.chat import DocumentPayload, FileDescriptor, ImagePayload

logger = structlog.get_logger(__name__)


class FileProcessingError(Exception):
    """An attachment could not be turned into a payload."""


class UnsupportedFileTypeError(FileProcessingError):
    """The attachment MIME type is neither a PDF nor an image."""

    def __init__(self, mime_type: str):
        self.mime_type = mime_type
        super().__init__(f"Unsupported file type: {mime_type}")


def _extract_pdf(path: str) -> tuple[str, int]:
    reader = PdfReader(path)
    pages = [page.extract_text() or "" for page in reader.pages]
    return "\n".join(pages).strip(), len(pages)


def _encode_image(path: str, mime_type: str) -> tuple[str, int]:
    raw = Path(path).read_bytes()
    encoded = base64.b64encode(raw).decode("ascii")
    return f"data:{mime_type};base64,{encoded}", len(raw)


async def process_file(file: FileDescriptor) -> ImagePayload | DocumentPayload:
    """
    Convert an uploaded attachment into an image or document payload.

    Args:
        file: MIME type and storage path of the uploaded file.

    Returns:
        ImagePayload for images, DocumentPayload for PDFs.

    Raises:
        UnsupportedFileTypeError: MIME type is neither PDF nor image.
        FileProcessingError: The file could not be read or parsed.
    """
    mime_type = file.mime_type.lower()

    if "pdf" in mime_type:
        try:
            text, page_count = await asyncio.to_thread(_extract_pdf, file.path)
        except Exception as e:
            logger.error("pdf_extraction_failed", path=file.path, error=str(e))
            raise FileProcessingError(f"Could not read PDF: {e}") from e

        logger.info(
            "file_processed",
            kind="document",
            original_name=file.original_name,
            page_count=page_count,
            text_length=len(text),
        )
        return DocumentPayload(text=text, page_count=page_count, original_name=file.original_name)

    if "image" in mime_type:
        try:
            data_url, size = await asyncio.to_thread(_encode_image, file.path, file.mime_type)
        except OSError as e:
            logger.error("image_read_failed", path=file.path, error=str(e))
            raise FileProcessingError(f"Could not read image: {e}") from e

        logger.info(
            "file_processed",
            kind="image",
            original_name=file.original_name,
            mime_type=file.mime_type,
            size_bytes=size,
        )
        return ImagePayload(mime_type=file.mime_type, data_url=data_url, size_bytes=size)

    raise UnsupportedFileTypeError(file.mime_type)
