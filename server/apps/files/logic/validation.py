"""Validation rules for uploaded files."""

import logging
from dataclasses import dataclass
from typing import Final, final

from django.conf import settings

from server.apps.files.exceptions import UploadValidationError
from server.apps.files.infrastructure.byte_source import BytePayload

logger = logging.getLogger(__name__)

# 5 MB, files of exactly this size are still accepted
_DEFAULT_MAX_UPLOAD_BYTES: Final = 5 * 1024 * 1024

# Matched as substrings of the declared content type
ACCEPTED_CONTENT_TYPES: Final = ('image/jpeg', 'application/pdf')

NAME_REQUIRED: Final = 'File name is required'
FILE_REQUIRED: Final = 'File is required'
FILE_TOO_LARGE: Final = 'File must be less than 5MB'
INVALID_CONTENT_TYPE: Final = 'File must be a JPEG or PDF'


@final
@dataclass(frozen=True, slots=True)
class UploadRequest:
    """A proposed upload, as received from the transport layer."""

    name: str
    payload: BytePayload | None
    content_type: str
    size: int


def get_max_upload_bytes() -> int:
    """Get the upload size limit.

    Returns:
        Limit in bytes from settings or the 5 MB default.
    """
    return getattr(settings, 'FILES_MAX_UPLOAD_BYTES', _DEFAULT_MAX_UPLOAD_BYTES)


def validate_upload(
    name: str | None,
    payload: BytePayload | None,
    content_type: str | None,
    size: int | None,
) -> list[str]:
    """Check an upload against name, presence, size and type rules.

    All violations are collected. Size and type are only checked
    when a payload is present.

    Args:
        name: Proposed file name.
        payload: Payload descriptor, None when no file was sent.
        content_type: Declared MIME type.
        size: Declared size in bytes.

    Returns:
        Violation messages, empty when the upload is valid.
    """
    violations: list[str] = []

    if not name:
        violations.append(NAME_REQUIRED)

    if payload is None:
        violations.append(FILE_REQUIRED)
        return violations

    if (size or 0) > get_max_upload_bytes():
        violations.append(FILE_TOO_LARGE)

    if not any(
        accepted in (content_type or '')
        for accepted in ACCEPTED_CONTENT_TYPES
    ):
        violations.append(INVALID_CONTENT_TYPE)

    return violations


def ensure_valid_upload(request: UploadRequest) -> None:
    """Validate an upload request or raise.

    Args:
        request: Upload to validate.

    Raises:
        UploadValidationError: If any rule is violated.
    """
    violations = validate_upload(
        request.name,
        request.payload,
        request.content_type,
        request.size,
    )
    if violations:
        logger.warning(
            'Upload rejected for %r: %s',
            request.name,
            ', '.join(violations),
        )
        raise UploadValidationError(violations)
