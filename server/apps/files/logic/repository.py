"""Metadata repository for stored files."""

import logging
from typing import final

from django.db import IntegrityError, transaction
from django.db.models import QuerySet
from django.utils import timezone

from server.apps.files.exceptions import (
    FileAlreadyExistsError,
    FileRecordNotFoundError,
)
from server.apps.files.models import File

logger = logging.getLogger(__name__)


@final
class FileRepository:
    """Reads and writes File rows.

    Every read goes through ``File.objects``, so soft-deleted rows are
    invisible here.
    """

    def create(self, file_name: str, file_url: str) -> File:
        """Create a file record in its own transaction.

        Args:
            file_name: Unique name among active files.
            file_url: Public URL of the stored object.

        Returns:
            Created File instance.

        Raises:
            FileAlreadyExistsError: If an active file with this name was
                created concurrently.
        """
        now = timezone.now()
        try:
            with transaction.atomic():
                file_instance = File.objects.create(
                    file_name=file_name,
                    file_url=file_url,
                    created_at=now,
                    updated_at=now,
                    deleted_at=None,
                )
        except IntegrityError as error:
            logger.warning(
                'Active file name conflict on insert: %s',
                file_name,
            )
            raise FileAlreadyExistsError(file_name) from error

        logger.info(
            'File record created in database: %s (ID: %d)',
            file_name,
            file_instance.id,
        )
        return file_instance

    def list_active(self) -> QuerySet[File]:
        """List active files.

        Returns:
            QuerySet of active files, newest first.
        """
        return File.objects.order_by('-created_at', '-id')

    def find_active_by_name(self, file_name: str) -> File | None:
        """Find the active file with the given name.

        Args:
            file_name: Name to look up.

        Returns:
            File instance or None.
        """
        return File.objects.filter(file_name=file_name).first()

    def update(self, file_id: int, file_name: str, file_url: str) -> File:
        """Point a file record at new content.

        Args:
            file_id: ID of file to update.
            file_name: Name to store.
            file_url: New public URL.

        Returns:
            Updated File instance.

        Raises:
            FileRecordNotFoundError: If no active file has this ID.
        """
        with transaction.atomic():
            file_instance = (
                File.objects.select_for_update().filter(id=file_id).first()
            )
            if file_instance is None:
                logger.warning('No active file to update: ID=%d', file_id)
                raise FileRecordNotFoundError(file_name)
            file_instance.file_name = file_name
            file_instance.file_url = file_url
            file_instance.updated_at = timezone.now()
            file_instance.save(update_fields=[
                'file_name',
                'file_url',
                'updated_at',
            ])

        logger.info(
            'File record updated: %s (ID: %d)',
            file_name,
            file_id,
        )
        return file_instance

    def soft_delete(self, file_id: int) -> File | None:
        """Mark a file as deleted.

        Only ``deleted_at`` is written, other fields stay untouched.

        Args:
            file_id: ID of file to soft delete.

        Returns:
            Updated File instance, or None if no active file has this ID.
        """
        with transaction.atomic():
            file_instance = (
                File.objects.select_for_update().filter(id=file_id).first()
            )
            if file_instance is None:
                logger.warning('No active file to soft delete: ID=%d', file_id)
                return None

            file_instance.deleted_at = timezone.now()
            file_instance.save(update_fields=['deleted_at'])

        logger.info(
            'File moved to trash: %s (ID: %d)',
            file_instance.file_name,
            file_id,
        )
        return file_instance
