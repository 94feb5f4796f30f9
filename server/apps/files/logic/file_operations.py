"""Business logic for file operations."""

import logging
import math
from datetime import datetime
from typing import TYPE_CHECKING, Any, Final, final

from django.core.files.storage import default_storage
from django.utils import timezone

from server.apps.files.exceptions import (
    DeleteFailedError,
    FileRecordNotFoundError,
    UploadFailedError,
)
from server.apps.files.logic.repository import FileRepository
from server.apps.files.logic.upload_operations import (
    UploadOrchestrator,
    UploadResult,
)
from server.apps.files.logic.validation import UploadRequest
from server.apps.files.models import File

if TYPE_CHECKING:
    from server.apps.files.infrastructure.storage import FileStorage

logger = logging.getLogger(__name__)

# Listing is not paginated server-side yet, the envelope is fixed
_PAGE: Final = 1
_PAGE_LIMIT: Final = 10

_DATE_FORMAT: Final = '%d/%m/%Y'

FileView = dict[str, Any]


def _get_storage() -> 'FileStorage':
    """Get the configured default storage backend.

    Returns:
        FileStorage instance with proper S3 configuration.
    """
    return default_storage  # type: ignore[return-value]


def format_date(value: datetime | None) -> str | None:
    """Format a timestamp as day/month/year in the current time zone.

    Args:
        value: Timestamp to format.

    Returns:
        Date string (e.g., '31/01/2026'), or None for None.
    """
    if value is None:
        return None
    if timezone.is_aware(value):
        value = timezone.localtime(value)
    return value.strftime(_DATE_FORMAT)


def format_file(file_instance: File) -> FileView:
    """Shape a file record for responses.

    Args:
        file_instance: File to format.

    Returns:
        Dict with id, fileName, fileUrl and formatted dates.
        ``deleted_at`` is only included for deleted files.
    """
    view: FileView = {
        'id': file_instance.id,
        'fileName': file_instance.file_name,
        'fileUrl': file_instance.file_url,
        'created_at': format_date(file_instance.created_at),
        'updated_at': format_date(file_instance.updated_at),
    }
    if file_instance.deleted_at is not None:
        view['deleted_at'] = format_date(file_instance.deleted_at)
    return view


@final
class FileService:
    """Public file operations over a name-addressed namespace."""

    def __init__(
        self,
        repository: FileRepository,
        orchestrator: UploadOrchestrator,
    ) -> None:
        """Initialize the service.

        Args:
            repository: Metadata repository.
            orchestrator: Orchestrator running storage flows.
        """
        self._repository = repository
        self._orchestrator = orchestrator

    def upload(self, request: UploadRequest) -> UploadResult:
        """Upload a new file.

        Args:
            request: Upload to perform.

        Returns:
            Dict with the public URL.

        Raises:
            FileAlreadyExistsError: If an active file has this name.
            UploadFailedError: If storage returned no URL.
        """
        result = self._orchestrator.create(request)
        if not result or not result.get('url'):
            logger.error('Upload returned no URL: %s', request.name)
            raise UploadFailedError()

        logger.info('File uploaded: %s -> %s', request.name, result['url'])
        return result

    def list_files(self) -> dict[str, Any]:
        """List active files, newest first.

        Returns:
            Dict with formatted ``files`` and a ``pagination`` envelope.
        """
        files = [
            format_file(file_instance)
            for file_instance in self._repository.list_active()
        ]
        total = len(files)
        return {
            'files': files,
            'pagination': {
                'total': total,
                'page': _PAGE,
                'limit': _PAGE_LIMIT,
                'totalPages': math.ceil(total / _PAGE_LIMIT),
            },
        }

    def get_by_name(self, file_name: str) -> FileView:
        """Get an active file by name.

        Args:
            file_name: Name to look up.

        Returns:
            Formatted file.

        Raises:
            FileRecordNotFoundError: If no active file has this name.
        """
        return format_file(self._get_active(file_name))

    def update(self, file_name: str, request: UploadRequest) -> FileView:
        """Replace the content of an active file.

        Args:
            file_name: Name of file to update.
            request: Upload with the new content.

        Returns:
            Formatted updated file.

        Raises:
            FileRecordNotFoundError: If no active file has this name.
        """
        file_instance = self._get_active(file_name)
        updated = self._orchestrator.update(file_instance, request)
        logger.info('File updated: %s (ID: %d)', file_name, updated.id)
        return format_file(updated)

    def delete_by_name(self, file_name: str) -> FileView:
        """Soft delete an active file.

        Args:
            file_name: Name of file to delete.

        Returns:
            Formatted deleted file, including ``deleted_at``.

        Raises:
            FileRecordNotFoundError: If no active file has this name.
            DeleteFailedError: If the record could not be soft deleted.
        """
        file_instance = self._get_active(file_name)
        deleted = self._orchestrator.delete(file_instance)
        if deleted is None:
            logger.error('Soft delete returned nothing: %s', file_name)
            raise DeleteFailedError()
        return format_file(deleted)

    def _get_active(self, file_name: str) -> File:
        file_instance = self._repository.find_active_by_name(file_name)
        if file_instance is None:
            logger.warning('File not found: %s', file_name)
            raise FileRecordNotFoundError(file_name)
        return file_instance


def get_file_service() -> FileService:
    """Build a file service wired to the default storage.

    Returns:
        FileService instance.
    """
    repository = FileRepository()
    orchestrator = UploadOrchestrator(repository, _get_storage())
    return FileService(repository, orchestrator)
