"""Upload orchestration: validate, resolve bytes, store, persist.

Each flow is linear and stops at the first failing step. Steps that
already completed are not undone, except that an object written to
storage is rolled back when the metadata write that follows it fails.
"""

import logging
from typing import TYPE_CHECKING, TypedDict

from django.conf import settings

from server.apps.files.exceptions import (
    DeleteFailedError,
    FileAlreadyExistsError,
)
from server.apps.files.infrastructure.byte_source import resolve_bytes
from server.apps.files.infrastructure.storage import (
    build_storage_key,
    build_updated_storage_key,
)
from server.apps.files.logic.repository import FileRepository
from server.apps.files.logic.validation import (
    UploadRequest,
    ensure_valid_upload,
)
from server.apps.files.models import File

if TYPE_CHECKING:
    from server.apps.files.infrastructure.storage import FileStorage

logger = logging.getLogger(__name__)


class UploadResult(TypedDict):
    """Result of a successful create flow."""

    url: str


def is_strict_storage_delete() -> bool:
    """Whether storage delete failures abort a file delete.

    Returns:
        FILES_STRICT_STORAGE_DELETE from settings, False by default.
    """
    return getattr(settings, 'FILES_STRICT_STORAGE_DELETE', False)


def current_storage_key(file_instance: File) -> str:
    """Get the storage key the record currently points at.

    Updated records point at the ``.updated`` key, others at the
    original one.

    Args:
        file_instance: Active file record.

    Returns:
        Storage key of the object behind ``file_url``.
    """
    updated_key = build_updated_storage_key(file_instance.file_name)
    if file_instance.file_url.endswith(updated_key):
        return updated_key
    return build_storage_key(file_instance.file_name)


class UploadOrchestrator:
    """Runs the create, update and delete flows for files."""

    def __init__(
        self,
        repository: FileRepository,
        storage: 'FileStorage',
    ) -> None:
        """Initialize the orchestrator.

        Args:
            repository: Metadata repository.
            storage: Storage backend.
        """
        self._repository = repository
        self._storage = storage

    def create(self, request: UploadRequest) -> UploadResult:
        """Upload a new file and record it.

        Args:
            request: Upload to perform.

        Returns:
            Dict with the public URL of the stored file.

        Raises:
            FileAlreadyExistsError: If the name is already active.
            UploadValidationError: If the upload breaks a rule.
            PayloadUnavailableError: If the bytes can't be obtained.
        """
        if self._repository.find_active_by_name(request.name) is not None:
            logger.warning('File name already exists: %s', request.name)
            raise FileAlreadyExistsError(request.name)

        ensure_valid_upload(request)
        content = resolve_bytes(request.payload)

        storage_key = build_storage_key(request.name)
        file_url = self._store(content, storage_key, request.content_type)

        try:
            self._repository.create(request.name, file_url)
        except FileAlreadyExistsError:
            # The key now belongs to the record that won the race
            logger.warning(
                'Concurrent upload won for %s, keeping storage object',
                request.name,
            )
            raise
        except Exception:
            logger.exception(
                'Database write failed, rolling back storage upload: %s',
                storage_key,
            )
            self._storage.rollback_upload(storage_key)
            raise

        return {'url': file_url}

    def update(self, file_instance: File, request: UploadRequest) -> File:
        """Replace the content of an existing file.

        New content goes to the ``.updated`` key so the original object
        is never overwritten before the record points elsewhere. When the
        record already points at that key, a failed metadata write leaves
        the object in place.

        Args:
            file_instance: Active record to update.
            request: Upload with the new content.

        Returns:
            Updated File instance.

        Raises:
            UploadValidationError: If the upload breaks a rule.
            PayloadUnavailableError: If the bytes can't be obtained.
        """
        ensure_valid_upload(request)
        content = resolve_bytes(request.payload)

        storage_key = build_updated_storage_key(file_instance.file_name)
        # A second update overwrites the object the record already serves
        is_live_key = storage_key == current_storage_key(file_instance)
        file_url = self._store(content, storage_key, request.content_type)

        try:
            return self._repository.update(
                file_instance.id,
                file_instance.file_name,
                file_url,
            )
        except Exception:
            if is_live_key:
                logger.exception(
                    'DB update failed, keeping live object: %s',
                    storage_key,
                )
                raise
            logger.exception('DB update failed, rolling back: %s', storage_key)
            self._storage.rollback_upload(storage_key)
            raise

    def delete(self, file_instance: File) -> File | None:
        """Remove a file from storage and soft delete its record.

        Storage errors are logged and ignored unless strict deletes
        are enabled.

        Args:
            file_instance: Active record to delete.

        Returns:
            Soft-deleted File instance, or None if nothing was deleted.

        Raises:
            DeleteFailedError: If strict deletes are enabled and the
                storage delete fails.
        """
        storage_key = current_storage_key(file_instance)
        try:
            self._storage.delete(storage_key)
        except Exception as error:
            if is_strict_storage_delete():
                logger.exception(
                    'Failed to delete file from storage, aborting: %s',
                    storage_key,
                )
                raise DeleteFailedError() from error
            logger.exception(
                'Failed to delete file from storage (orphaned): %s',
                storage_key,
            )

        return self._repository.soft_delete(file_instance.id)

    def _store(self, content: bytes, storage_key: str, content_type: str) -> str:
        try:
            return self._storage.put(content, storage_key, content_type)
        except Exception:
            logger.exception('Failed to upload file to storage: %s', storage_key)
            raise
