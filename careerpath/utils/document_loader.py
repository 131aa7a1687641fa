"""
Document Loader Module

Reads an uploaded CV from disk and prepares it for inline submission to the
extraction model: base64 payload plus media type. PDFs and images are sent
as-is, since the model reads both natively.
"""

import base64
import mimetypes
from dataclasses import dataclass
from pathlib import Path

import structlog

from careerpath.errors import ExtractionError

logger = structlog.get_logger(__name__)

_DOCUMENT_MIME: dict[str, str] = {
    ".pdf": "application/pdf",
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".webp": "image/webp",
    ".heic": "image/heic",
    ".heif": "image/heif",
}

SUPPORTED_EXTENSIONS = tuple(sorted(_DOCUMENT_MIME))


@dataclass(frozen=True)
class EncodedDocument:
    """A document ready for the extraction gateway."""

    filename: str
    mime_type: str
    data_base64: str
    size_bytes: int


def is_supported_mime_type(mime_type: str) -> bool:
    """True for PDFs and images, the media types the extraction model reads."""
    return mime_type == "application/pdf" or mime_type.startswith("image/")


def validate_document(data: bytes, mime_type: str) -> str:
    """
    Check a raw upload before it is sent for extraction.

    Args:
        data: Raw document bytes
        mime_type: Declared media type; parameters such as charset are ignored

    Returns:
        Normalized media type

    Raises:
        ExtractionError: If the payload is empty or the type is not a PDF or image
    """
    normalized = (mime_type or "").split(";", 1)[0].strip().lower()
    if not is_supported_mime_type(normalized):
        logger.warning("document_type_rejected", mime_type=mime_type)
        raise ExtractionError(
            f"Unsupported document type '{mime_type}'. Upload a PDF or an image."
        )
    if not data:
        logger.warning("document_empty", mime_type=normalized)
        raise ExtractionError("Document is empty")
    return normalized


def guess_mime_type(file_path: Path) -> str:
    """
    Return the media type for a supported document.

    Raises:
        ExtractionError: If the file type is not a PDF or supported image
    """
    ext = file_path.suffix.lower()
    mime_type = _DOCUMENT_MIME.get(ext)
    if mime_type is None:
        guessed = mimetypes.guess_type(str(file_path))[0] or ""
        if is_supported_mime_type(guessed):
            return guessed
        raise ExtractionError(
            f"Unsupported file type '{ext or file_path.name}'. "
            f"Supported types: {', '.join(SUPPORTED_EXTENSIONS)}."
        )
    return mime_type


def encode_bytes(data: bytes) -> str:
    """Base64-encode raw document bytes as ASCII text."""
    return base64.b64encode(data).decode("ascii")


def load_document(file_path: Path | str) -> EncodedDocument:
    """
    Read and encode a CV file.

    Args:
        file_path: Path to a PDF or image

    Returns:
        EncodedDocument

    Raises:
        ExtractionError: If the file is missing, unreadable, empty or of an unsupported type
    """
    path = Path(file_path).expanduser()

    if not path.is_file():
        logger.warning("document_not_found", path=str(path))
        raise ExtractionError(f"File not found: {path}")

    mime_type = guess_mime_type(path)

    try:
        raw = path.read_bytes()
    except OSError as e:
        logger.error("document_read_failed", path=str(path), error=str(e))
        raise ExtractionError(f"Could not read {path.name}: {e}") from e

    if not raw:
        raise ExtractionError(f"File is empty: {path.name}")

    logger.debug(
        "document_loaded", filename=path.name, mime_type=mime_type, size_bytes=len(raw)
    )
    return EncodedDocument(
        filename=path.name,
        mime_type=mime_type,
        data_base64=encode_bytes(raw),
        size_bytes=len(raw),
    )
