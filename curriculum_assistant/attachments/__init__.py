"""File attachment utilities.

Turns user-selected files into inline message payloads and back.

Responsibilities:
    - Upload size ceiling (10MB)
    - Base64 data URL encoding on the client
    - Data URL decoding before content is passed to the model

No document parsing happens here; the model provider reads the file itself.
"""

from curriculum_assistant.attachments.data_url import (
    MAX_FILE_SIZE,
    AttachmentError,
    decode_data_url,
    encode_data_url,
    to_file_part,
    validate_size,
)

__all__ = [
    "MAX_FILE_SIZE",
    "AttachmentError",
    "decode_data_url",
    "encode_data_url",
    "to_file_part",
    "validate_size",
]
