"""Checklist and exam templates of a hospital."""
from __future__ import annotations

from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated

from ..permissions import IsHospitalRole, can_manage_hospital, ensure
from ..serializers.staff import TemplateRefSerializer, TemplateSaveSerializer
from ..services import templates as service
from ..services.store import get_store
from .common import current_tree, require_hospital, require_owned, respond

CHECKLISTS = 'checklistTemplates'
EXAMS = 'examTemplates'


def _save(request, save, collection):
    s = TemplateSaveSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    vd = s.validated_data
    ensure(can_manage_hospital(request.user, vd['hospitalId']))
    hospital = require_hospital(current_tree(), vd['hospitalId'])
    if vd['template'].get('id'):
        require_owned(hospital[collection], vd['template']['id'], 'Template not found in this hospital.')
    return respond(request, save(get_store(), vd['hospitalId'], vd['template']))


def _delete(request, delete, collection):
    s = TemplateRefSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    vd = s.validated_data
    ensure(can_manage_hospital(request.user, vd['hospitalId']))
    hospital = require_hospital(current_tree(), vd['hospitalId'])
    require_owned(hospital[collection], vd['templateId'], 'Template not found in this hospital.')
    return respond(request, delete(get_store(), vd['templateId']))


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsHospitalRole])
def save_checklist_template(request):
    return _save(request, service.save_checklist_template, CHECKLISTS)


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsHospitalRole])
def delete_checklist_template(request):
    return _delete(request, service.delete_checklist_template, CHECKLISTS)


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsHospitalRole])
def save_exam_template(request):
    return _save(request, service.save_exam_template, EXAMS)


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsHospitalRole])
def delete_exam_template(request):
    return _delete(request, service.delete_exam_template, EXAMS)
