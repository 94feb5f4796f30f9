"""Resolution of upload payloads into raw bytes."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import final

from django.core.files.uploadedfile import UploadedFile

from server.apps.files.exceptions import PayloadUnavailableError

logger = logging.getLogger(__name__)

_Content = bytes | bytearray | memoryview


@final
@dataclass(frozen=True, slots=True)
class BytePayload:
    """Where the bytes of an upload can be found.

    Either ``content`` holds the bytes already in memory, or ``path``
    points at a local file holding them.
    """

    content: _Content | None = None
    path: str | Path | None = None

    @classmethod
    def from_uploaded_file(cls, uploaded: UploadedFile) -> 'BytePayload':
        """Build a payload from a Django uploaded file.

        Large uploads are spilled to disk by Django's upload handlers,
        those are referenced by path instead of being read here.

        Args:
            uploaded: File from ``request.FILES``.

        Returns:
            Payload referencing the uploaded bytes.
        """
        temporary_file_path = getattr(uploaded, 'temporary_file_path', None)
        if temporary_file_path is not None:
            return cls(path=temporary_file_path())
        uploaded.seek(0)
        return cls(content=uploaded.read())


def resolve_bytes(payload: BytePayload | None) -> bytes:
    """Get the raw bytes of an upload payload.

    In-memory content wins over a path. Content is never re-encoded,
    ``bytearray`` and ``memoryview`` are only copied into ``bytes``.

    Args:
        payload: Payload descriptor.

    Returns:
        Raw file bytes.

    Raises:
        PayloadUnavailableError: If neither content nor a readable path
            is available.
    """
    has_content = payload is not None and payload.content is not None
    has_path = payload is not None and bool(payload.path)

    if payload is not None and payload.content is not None:
        if isinstance(payload.content, bytes):
            return payload.content
        return bytes(payload.content)

    if payload is not None and payload.path:
        try:
            return Path(payload.path).read_bytes()
        except OSError as error:
            logger.exception('Failed to read upload payload from disk')
            raise PayloadUnavailableError(
                has_content=has_content,
                has_path=has_path,
            ) from error

    logger.warning(
        'Upload payload has no bytes (has_content=%s, has_path=%s)',
        has_content,
        has_path,
    )
    raise PayloadUnavailableError(has_content=has_content, has_path=has_path)
