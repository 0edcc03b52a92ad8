"""
Direct blob endpoints used by the browser client.

``upload`` hands out a signed upload token for an allowed content type;
``delete-blob`` removes a stored object by its public URL.  Both answer
with a bare ``{"error": ...}`` body on failure.
"""
from __future__ import annotations

import logging

from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ..exceptions import PortalError, StoreError
from ..permissions import IsDepartmentRole
from ..serializers.materials import DeleteBlobSerializer, UploadRequestSerializer
from ..services.audit import log_action
from ..services.materials import authorize_upload, delete_blob
from ..services.store import get_store

logger = logging.getLogger(__name__)


def _first_error(errors) -> str:
    for messages in errors.values():
        return str(messages[0])
    return 'Invalid request.'


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsDepartmentRole])
def upload(request):
    s = UploadRequestSerializer(data=request.data)
    if not s.is_valid():
        return Response({'error': _first_error(s.errors)}, status=400)
    try:
        token = authorize_upload(get_store(), s.validated_data['pathname'], s.validated_data['contentType'])
    except PortalError as e:
        return Response({'error': str(e)}, status=400)
    log_action(principal=request.user, action='blob.authorize', object_type='blob',
               object_id=token['path'], detail={'contentType': s.validated_data['contentType']})
    return Response(token)


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsDepartmentRole])
def delete_blob_view(request):
    s = DeleteBlobSerializer(data=request.data)
    if not s.is_valid():
        return Response({'error': _first_error(s.errors)}, status=400)
    url = s.validated_data['url']
    try:
        delete_blob(get_store(), url)
    except StoreError as e:
        logger.error("blob delete failed for %s: %s", url, e)
        return Response({'error': 'Failed to delete blob.'}, status=500)
    log_action(principal=request.user, action='blob.delete', object_type='blob', object_id=url)
    return Response({'success': True})
