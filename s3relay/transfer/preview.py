"""
Attachment classification for uploaded files.

Lets the notification-composition side decide between an inline image
preview and a generic file link, without fetching the object.
"""

from __future__ import annotations

from typing import Any, Optional

from s3relay.core.types import UploadResult
from s3relay.transfer.keys import file_extension as _dotted_extension


def is_image(mime_type: Optional[str]) -> bool:
    return bool(mime_type) and mime_type.strip().lower().startswith("image/")


def file_extension(file_name: str) -> str:
    """Lowercased extension without the dot (``"PNG"`` → ``"png"``), or ``""``."""
    return _dotted_extension(file_name).lstrip(".")


def describe_attachment(result: UploadResult) -> Optional[dict[str, Any]]:
    """
    Summarize a successful upload for display.

    Returns None for failed uploads.
    """
    if not result.success or not result.access_url:
        return None
    name = result.original_file_name or ""
    return {
        "url": result.access_url,
        "file_name": name,
        "mime_type": result.mime_type,
        "extension": file_extension(name),
        "is_image": is_image(result.mime_type),
    }
