"""JSON views for files app.

Thin adapter over FileService: parses multipart input into an
UploadRequest and maps FileOperationError to HTTP 400.
"""

import logging
from collections.abc import Callable
from functools import wraps
from typing import Any

from django.core.files.uploadedfile import UploadedFile
from django.http import HttpRequest, JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods

from server.apps.files.exceptions import FileOperationError
from server.apps.files.infrastructure.byte_source import BytePayload
from server.apps.files.logic.file_operations import get_file_service
from server.apps.files.logic.validation import UploadRequest

logger = logging.getLogger(__name__)

_BAD_REQUEST = 400

_View = Callable[..., JsonResponse]


def _bad_request_on_file_errors(view: _View) -> _View:
    @wraps(view)
    def wrapper(request: HttpRequest, *args: Any, **kwargs: Any) -> JsonResponse:
        try:
            return view(request, *args, **kwargs)
        except FileOperationError as error:
            logger.info('Rejected %s %s: %s', request.method, request.path, error)
            return JsonResponse({'message': str(error)}, status=_BAD_REQUEST)
    return wrapper


def _build_upload_request(
    file_name: str,
    uploaded: UploadedFile | None,
) -> UploadRequest:
    if uploaded is None:
        return UploadRequest(
            name=file_name,
            payload=None,
            content_type='',
            size=0,
        )
    return UploadRequest(
        name=file_name,
        payload=BytePayload.from_uploaded_file(uploaded),
        content_type=uploaded.content_type or '',
        size=uploaded.size or 0,
    )


@csrf_exempt
@require_http_methods(['GET', 'POST'])
@_bad_request_on_file_errors
def file_collection(request: HttpRequest) -> JsonResponse:
    """List files (GET) or upload a new one (POST, multipart)."""
    service = get_file_service()
    if request.method == 'GET':
        return JsonResponse(service.list_files())

    uploaded = request.FILES.get('file')
    file_name = request.POST.get('filename') or (
        uploaded.name if uploaded is not None else ''
    )
    result = service.upload(_build_upload_request(file_name or '', uploaded))
    return JsonResponse(result)


@csrf_exempt
@require_http_methods(['GET', 'PUT', 'DELETE'])
@_bad_request_on_file_errors
def file_detail(request: HttpRequest, name: str) -> JsonResponse:
    """Get, replace or soft delete a file by name."""
    service = get_file_service()
    if request.method == 'GET':
        return JsonResponse(service.get_by_name(name))
    if request.method == 'DELETE':
        return JsonResponse(service.delete_by_name(name))

    uploaded = None
    # Django only parses multipart bodies for POST
    if request.content_type == 'multipart/form-data':
        _, files = request.parse_file_upload(request.META, request)
        uploaded = files.get('file')
    return JsonResponse(
        service.update(name, _build_upload_request(name, uploaded)),
    )
