"""Django storage configuration for S3-compatible backends.

This module configures django-storages to work with:
- AWS S3 in production
- MinIO for local development

Both are S3-compatible and use the same S3Storage backend.
"""

from typing import Any, Final

from server.settings.components import config

# Storage configuration dictionary
# Uses S3-compatible storage for uploaded files, local storage for static files
STORAGES: Final[dict[str, dict[str, Any]]] = {
    'default': {
        'BACKEND': 'server.apps.files.infrastructure.storage.FileStorage',
        'OPTIONS': {
            'bucket_name': config(
                'AWS_STORAGE_BUCKET_NAME',
                default='files-processor',
            ),
            'access_key': config('AWS_ACCESS_KEY_ID', default=None),
            'secret_key': config('AWS_SECRET_ACCESS_KEY', default=None),
            'endpoint_url': config(
                'AWS_S3_ENDPOINT_URL',
                default=None,
            ),
            'region_name': config(
                'AWS_REGION',
                default='us-east-1',
            ),
            'file_overwrite': True,  # Same name, same key: replace object
            'querystring_auth': False,  # Plain public URLs, never signed
            'default_acl': None,  # Inherit bucket ACL
        },
    },
    'staticfiles': {
        # Keep static files separate from uploaded files
        'BACKEND': 'django.contrib.staticfiles.storage.StaticFilesStorage',
    },
}
