"""Database models for files app."""

from typing import final, override

from django.db import models
from django.utils import timezone


class ActiveFileManager(models.Manager['File']):
    """Manager that hides soft-deleted files."""

    @override
    def get_queryset(self) -> models.QuerySet['File']:
        """Return only files without a deletion timestamp."""
        return super().get_queryset().filter(deleted_at__isnull=True)


@final
class File(models.Model):
    """Metadata for a file stored in S3-compatible storage.

    The object itself lives at ``files/<file_name>/<file_name>`` in the
    bucket; this row only keeps its public URL. Rows are soft deleted by
    setting ``deleted_at`` and are never removed by the files app.
    """

    id = models.AutoField(primary_key=True)

    file_name = models.TextField(
        db_column='fileName',
        help_text='Name used as identity and storage key component',
    )

    file_url = models.TextField(
        db_column='fileUrl',
        help_text='Public URL returned by the storage backend',
    )

    # Timestamps are assigned by FileRepository so created_at and
    # updated_at share the same instant on creation.
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(default=timezone.now)
    deleted_at = models.DateTimeField(null=True, blank=True)

    objects = ActiveFileManager()
    all_objects = models.Manager()

    class Meta:
        """Model metadata."""

        db_table = 'files'
        verbose_name = 'File'  # type: ignore[mutable-override]
        verbose_name_plural = 'Files'  # type: ignore[mutable-override]
        ordering = ['-created_at']

        indexes = [
            # Optimize newest-first listing
            models.Index(
                fields=['-created_at'],
                name='files_recent_idx',
            ),
        ]

        constraints = [
            # Only one active file per name; trash may hold duplicates
            models.UniqueConstraint(
                fields=['file_name'],
                condition=models.Q(deleted_at__isnull=True),
                name='files_active_name_unique',
            ),
        ]

    @override
    def __str__(self) -> str:
        """String representation."""
        return self.file_name

    @property
    def is_deleted(self) -> bool:
        """Whether the file has been soft deleted."""
        return self.deleted_at is not None
