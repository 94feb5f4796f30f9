"""Shared fixtures for files app tests."""

from unittest.mock import Mock

import boto3
import pytest
from django.conf import settings
from django.core.files.storage import default_storage
from moto import mock_aws

from server.apps.files.infrastructure.byte_source import BytePayload
from server.apps.files.infrastructure.storage import FileStorage
from server.apps.files.logic.file_operations import FileService
from server.apps.files.logic.repository import FileRepository
from server.apps.files.logic.upload_operations import UploadOrchestrator
from server.apps.files.logic.validation import UploadRequest

JPEG_BYTES = b'\xff\xd8\xff\xe0\x00\x10JFIF\x00test jpeg\xff\xd9'
PDF_BYTES = b'%PDF-1.4\ntest pdf\n%%EOF'


@pytest.fixture
def bucket_name():
    """Name of the bucket configured for the default storage.

    Returns:
        Bucket name from settings.
    """
    return settings.STORAGES['default']['OPTIONS']['bucket_name']


@pytest.fixture
def mock_s3(bucket_name):
    """Mock S3 service with the files bucket.

    Yields:
        boto3 S3 resource with the files bucket created.
    """
    with mock_aws():
        # Create S3 resource
        conn = boto3.resource('s3', region_name='us-east-1')

        # Create bucket
        conn.create_bucket(Bucket=bucket_name)

        yield conn


@pytest.fixture
def storage(mock_s3):
    """Default storage backed by mocked S3.

    Returns:
        FileStorage instance.
    """
    return default_storage


@pytest.fixture
def repository():
    """Metadata repository.

    Returns:
        FileRepository instance.
    """
    return FileRepository()


@pytest.fixture
def file_service(db, repository, storage):
    """File service wired to mocked S3 and the test database.

    Returns:
        FileService instance.
    """
    return FileService(repository, UploadOrchestrator(repository, storage))


@pytest.fixture
def fake_storage():
    """Storage stand-in recording calls without network access.

    Returns:
        Mock with the FileStorage interface.
    """
    fake = Mock(spec=FileStorage)
    fake.put.side_effect = lambda content, key, content_type: (
        f'https://files-processor.s3.us-east-1.amazonaws.com/{key}'
    )
    return fake


@pytest.fixture
def make_request():
    """Factory for upload requests with sensible defaults.

    Returns:
        Callable building an UploadRequest.
    """
    def factory(
        name='photo.jpg',
        content=JPEG_BYTES,
        content_type='image/jpeg',
        size=None,
    ):
        payload = None if content is None else BytePayload(content=content)
        if size is None:
            size = len(content or b'')
        return UploadRequest(
            name=name,
            payload=payload,
            content_type=content_type,
            size=size,
        )
    return factory
