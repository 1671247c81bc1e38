"""Inline data payloads for file attachments.

Files travel inside chat messages as base64 ``data:`` URLs. This module
encodes selected files into such URLs on the client and decodes them back to
raw bytes before they are handed to the model.
"""

import base64
import binascii
import logging
import re

from curriculum_assistant.models.schemas import FilePart

logger = logging.getLogger(__name__)

# Constants
MAX_FILE_SIZE = 10 * 1024 * 1024  # 10MB
DEFAULT_MEDIA_TYPE = "application/octet-stream"

_DATA_URL_RE = re.compile(
    r"^data:(?P<media_type>[^;,]*)(?P<params>(;[^;,]*)*),(?P<payload>.*)$",
    re.DOTALL,
)


class AttachmentError(ValueError):
    """Raised when an attachment is too large or its payload is malformed."""

    pass


def validate_size(size: int, filename: str = "file") -> None:
    """Reject attachments over the upload ceiling.

    Args:
        size: File size in bytes.
        filename: Name used in the error message.

    Raises:
        AttachmentError: If the file exceeds MAX_FILE_SIZE.
    """
    if size > MAX_FILE_SIZE:
        size_mb = size / (1024 * 1024)
        raise AttachmentError(
            f"{filename} ({size_mb:.1f}MB) exceeds maximum allowed (10MB)"
        )


def encode_data_url(content: bytes, media_type: str | None) -> str:
    """Encode raw bytes as a base64 data URL."""
    payload = base64.b64encode(content).decode("ascii")
    return f"data:{media_type or DEFAULT_MEDIA_TYPE};base64,{payload}"


def decode_data_url(url: str) -> tuple[str, bytes]:
    """Decode a data URL into its media type and raw bytes.

    Args:
        url: A ``data:`` URL with a base64 or plain payload.

    Returns:
        Tuple of (media type, content bytes).

    Raises:
        AttachmentError: If the URL is not a well-formed data URL.
    """
    match = _DATA_URL_RE.match(url)
    if not match:
        raise AttachmentError("Invalid data URL: missing 'data:' header")

    media_type = match.group("media_type") or DEFAULT_MEDIA_TYPE
    params = match.group("params").split(";")
    payload = match.group("payload")

    if "base64" not in params:
        return media_type, payload.encode("utf-8")

    try:
        return media_type, base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise AttachmentError(f"Invalid base64 payload: {e}") from e


def to_file_part(filename: str, media_type: str | None, content: bytes) -> FilePart:
    """Build a file part carrying ``content`` inline.

    Raises:
        AttachmentError: If the content exceeds MAX_FILE_SIZE.
    """
    validate_size(len(content), filename)
    part = FilePart(
        filename=filename,
        media_type=media_type or DEFAULT_MEDIA_TYPE,
        url=encode_data_url(content, media_type),
    )
    logger.debug(f"Encoded attachment {filename} ({len(content)} bytes)")
    return part
