"""
Local backup of the whole hospital tree.

A restore replaces the shared tree in the cache only; nothing is written
to the store and the next resync brings the stored data back.
"""
from __future__ import annotations

from django.http import HttpResponse
from rest_framework.decorators import api_view, parser_classes, permission_classes
from rest_framework.parsers import JSONParser, MultiPartParser
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ..permissions import IsAdminRole
from ..serializers.backup import BackupRestoreSerializer
from ..services.audit import log_action
from ..services.backup import dump_backup, parse_backup
from ..services.tree import tree_store
from .common import current_tree


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdminRole])
def download_backup(request):
    filename, content = dump_backup(current_tree())
    log_action(principal=request.user, action='backup.save', object_type='backup', object_id=filename)
    resp = HttpResponse(content, content_type='application/json; charset=utf-8')
    resp['Content-Disposition'] = f'attachment; filename="{filename}"'
    return resp


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAdminRole])
@parser_classes([JSONParser, MultiPartParser])
def restore_backup(request):
    s = BackupRestoreSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    upload = s.validated_data.get('file')
    raw = upload.read() if upload is not None else s.validated_data['hospitals']
    hospitals = parse_backup(raw)
    tree_store.replace(hospitals, source='backup')
    log_action(principal=request.user, action='backup.restore', object_type='backup',
               detail={'hospitals': len(hospitals)})
    return Response({'ok': True, 'hospitals': len(hospitals)})
