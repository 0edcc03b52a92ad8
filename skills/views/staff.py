"""Staff members, patients and the per-staff assessment and work-log records."""
from __future__ import annotations

from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated

from ..permissions import IsDepartmentRole, can_access_staff, can_manage_department, ensure
from ..serializers.staff import (
    PatientCreateSerializer,
    PatientRefSerializer,
    StaffCreateSerializer,
    StaffRecordSerializer,
    StaffRefSerializer,
    StaffUpdateSerializer,
)
from ..services import staff as service
from ..services.store import get_store
from .common import current_tree, require_department, require_owned, require_patient, require_staff, respond


def _manage(request, vd) -> None:
    ensure(can_manage_department(request.user, vd['hospitalId'], vd['departmentId']))


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsDepartmentRole])
def add_staff(request):
    s = StaffCreateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    vd = s.validated_data
    _manage(request, vd)
    require_department(current_tree(), vd['hospitalId'], vd['departmentId'])
    result = service.add_staff(get_store(), vd['departmentId'], name=vd['name'], title=vd['title'],
                               national_id=vd['nationalId'], password=vd['password'])
    return respond(request, result, status=201)


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsDepartmentRole])
def update_staff(request):
    s = StaffUpdateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    changes = dict(s.validated_data)
    _manage(request, changes)
    require_staff(current_tree(), changes.pop('hospitalId'), changes.pop('departmentId'), changes['staffId'])
    staff_id = changes.pop('staffId')
    return respond(request, service.update_staff(get_store(), staff_id, changes))


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsDepartmentRole])
def delete_staff(request):
    s = StaffRefSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    vd = s.validated_data
    _manage(request, vd)
    require_staff(current_tree(), vd['hospitalId'], vd['departmentId'], vd['staffId'])
    return respond(request, service.delete_staff(get_store(), vd['staffId']))


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsDepartmentRole])
def add_patient(request):
    s = PatientCreateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    vd = s.validated_data
    _manage(request, vd)
    require_department(current_tree(), vd['hospitalId'], vd['departmentId'])
    result = service.add_patient(get_store(), vd['departmentId'], name=vd['name'],
                                 national_id=vd['nationalId'], password=vd['password'])
    return respond(request, result, status=201)


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsDepartmentRole])
def delete_patient(request):
    s = PatientRefSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    vd = s.validated_data
    _manage(request, vd)
    require_patient(current_tree(), vd['hospitalId'], vd['departmentId'], vd['patientId'])
    return respond(request, service.delete_patient(get_store(), vd['patientId']))


def _staff_record(request, save, collection):
    s = StaffRecordSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    vd = s.validated_data
    ensure(can_access_staff(request.user, vd['hospitalId'], vd['departmentId'], vd['staffId']))
    member = require_staff(current_tree(), vd['hospitalId'], vd['departmentId'], vd['staffId'])
    if vd['record'].get('id'):
        require_owned(member[collection], vd['record']['id'], 'Record not found for this staff member.')
    return respond(request, save(get_store(), vd['staffId'], vd['record']))


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def save_assessment(request):
    """Add or replace an assessment; staff members may record their own."""
    return _staff_record(request, service.save_assessment, 'assessments')


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def save_work_log(request):
    """Add or replace a monthly work log; staff members may record their own."""
    return _staff_record(request, service.save_work_log, 'workLogs')
