"""Custom storage backend for S3-compatible storage."""

import logging
from collections.abc import Iterator
from datetime import datetime
from typing import Any, Final, final, override

from django.conf import settings
from django.core.files.base import ContentFile
from storages.backends.s3 import S3Storage

logger = logging.getLogger(__name__)

_KEY_PREFIX: Final = 'files'
_UPDATED_SUFFIX: Final = '.updated'
_DEFAULT_URL_TEMPLATE: Final = 'https://{bucket}.s3.{region}.amazonaws.com/{key}'


def build_storage_key(file_name: str) -> str:
    """Build the storage key for a file name.

    The name is repeated on purpose, public URLs depend on this layout.

    Args:
        file_name: File name (e.g., 'report.pdf').

    Returns:
        Storage key (e.g., 'files/report.pdf/report.pdf').
    """
    return f'{_KEY_PREFIX}/{file_name}/{file_name}'


def build_updated_storage_key(file_name: str) -> str:
    """Build the storage key used for replacement content.

    The result is the create key of a file named ``<name>.updated``,
    so such a file shares its object with the updated ``<name>``:
    uploading it replaces that content and deleting it removes it.
    Public URLs already in use depend on this layout.

    Args:
        file_name: File name (e.g., 'report.pdf').

    Returns:
        Storage key (e.g., 'files/report.pdf.updated/report.pdf.updated').
    """
    return build_storage_key(f'{file_name}{_UPDATED_SUFFIX}')


@final
class FileStorage(S3Storage):
    """Custom S3 storage backend for uploaded files.

    Extends django-storages S3Storage with:
    - Byte-oriented put returning a public URL
    - Deterministic, unsigned URLs built from a template
    - Transaction rollback support for failed DB operations
    - Enhanced error logging
    """

    def put(self, content: bytes, key: str, content_type: str) -> str:
        """Write bytes at the given key and return the public URL.

        An existing object at the same key is replaced.

        Args:
            content: Raw file bytes.
            key: Storage key (see build_storage_key).
            content_type: MIME type stored with the object.

        Returns:
            Public URL of the stored object.
        """
        content_file = ContentFile(content)
        # S3Storage picks ContentType from this attribute before guessing
        content_file.content_type = content_type  # type: ignore[attr-defined]
        saved_name = self.save(key, content_file)
        return self.get_url(saved_name)

    def get_url(self, key: str) -> str:
        """Build the public URL for a storage key.

        Args:
            key: Storage key.

        Returns:
            URL rendered from FILES_PUBLIC_URL_TEMPLATE.
        """
        template = getattr(
            settings,
            'FILES_PUBLIC_URL_TEMPLATE',
            _DEFAULT_URL_TEMPLATE,
        )
        return template.format(
            bucket=self.bucket_name,
            region=self.region_name or 'us-east-1',
            endpoint=(self.endpoint_url or '').rstrip('/'),
            key=key,
        )

    def list_keys(
        self,
        prefix: str = _KEY_PREFIX,
        modified_before: datetime | None = None,
    ) -> Iterator[str]:
        """Iterate over object keys under a prefix.

        Args:
            prefix: Key prefix to scan.
            modified_before: Skip objects modified at or after this time.

        Yields:
            Object keys.
        """
        normalized = prefix.rstrip('/') + '/'
        for summary in self.bucket.objects.filter(Prefix=normalized):
            if (
                modified_before is not None
                and summary.last_modified >= modified_before
            ):
                continue
            yield summary.key

    @override
    def save(  # noqa: WPS211
        self,
        name: str,
        content: Any,
        max_length: int | None = None,
    ) -> str:
        """Save file to S3 with error handling and logging.

        Args:
            name: Storage path for the file.
            content: File content (file-like object).
            max_length: Optional maximum length for the filename.

        Returns:
            Actual storage path used.

        Raises:
            Exception: If S3 upload fails.
        """
        try:
            logger.info('Uploading file to storage: %s', name)
            saved_name = super().save(name, content, max_length)
            logger.info('Successfully uploaded file: %s', saved_name)
        except Exception:
            logger.exception('Failed to upload file to storage: %s', name)
            raise
        else:
            return saved_name

    @override
    def delete(self, name: str) -> None:
        """Delete file from S3 with error handling and logging.

        Deleting a key that does not exist is not an error.

        Args:
            name: Storage path of file to delete.

        Raises:
            Exception: If S3 delete fails.
        """
        try:
            logger.info('Deleting file from storage: %s', name)
            super().delete(name)
            logger.info('Successfully deleted file: %s', name)
        except Exception:
            logger.exception('Failed to delete file from storage: %s', name)
            raise

    def rollback_upload(self, name: str) -> None:
        """Delete uploaded file after a failed metadata write.

        This is a best-effort operation - if deletion fails, the error
        is logged but not raised, the orphan is left for
        the reconcile_storage command.

        Args:
            name: Storage path of file to delete.
        """
        try:
            logger.warning('Rolling back upload, deleting file: %s', name)
            self.delete(name)
            logger.info('Successfully rolled back file upload: %s', name)
        except Exception:
            logger.exception(
                'Failed to rollback upload, orphaned file: %s',
                name,
            )
