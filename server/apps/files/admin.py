"""Django admin configuration for files app."""

from django.contrib import admin
from django.db.models import QuerySet
from django.http import HttpRequest
from django.utils.html import format_html

from server.apps.files.models import File


@admin.register(File)
class FileAdmin(admin.ModelAdmin[File]):
    """Read-only admin interface for File metadata, trash included."""

    list_display = [
        'file_name',
        'url_display',
        'status_display',
        'created_at',
        'updated_at',
    ]

    list_filter = [
        'created_at',
        'deleted_at',
    ]

    search_fields = [
        'file_name',
    ]

    readonly_fields = [
        'file_name',
        'file_url',
        'created_at',
        'updated_at',
        'deleted_at',
    ]

    fieldsets = (
        ('File Information', {
            'fields': ('file_name', 'file_url'),
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at', 'deleted_at'),
        }),
    )

    def url_display(self, obj: File) -> str:
        """Display storage URL as a link.

        Args:
            obj: File instance.

        Returns:
            HTML anchor to the stored object.
        """
        return format_html('<a href="{url}">{url}</a>', url=obj.file_url)
    url_display.short_description = 'URL'  # type: ignore[attr-defined]

    def status_display(self, obj: File) -> str:
        """Display whether the file is active or in trash.

        Args:
            obj: File instance.

        Returns:
            HTML formatted status indicator.
        """
        if obj.is_deleted:
            color = '#dc3545'  # Red - soft deleted
            status = 'Deleted'
        else:
            color = '#28a745'  # Green - active
            status = 'Active'
        return format_html(
            '<span style="color: {color}; font-weight: bold;">'
            '{status}</span>',
            color=color,
            status=status,
        )
    status_display.short_description = 'Status'  # type: ignore[attr-defined]

    def get_queryset(self, request: HttpRequest) -> QuerySet[File]:
        """Include soft-deleted files.

        Args:
            request: HTTP request.

        Returns:
            QuerySet over all files.
        """
        return File.all_objects.all()

    def has_add_permission(self, request: HttpRequest) -> bool:
        """Files are only created through uploads."""
        return False

    def has_delete_permission(
        self,
        request: HttpRequest,
        obj: File | None = None,
    ) -> bool:
        """Rows are soft deleted only, never removed."""
        return False
