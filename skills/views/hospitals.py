"""
Hospital and department management.

Hospitals are created and removed by the global admin only; supervisors
edit their own hospital and its departments.
"""
from __future__ import annotations

from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated

from ..permissions import IsAdminRole, IsDepartmentRole, IsHospitalRole, can_manage_department, can_manage_hospital, ensure
from ..serializers.hospitals import (
    DepartmentCreateSerializer,
    DepartmentRefSerializer,
    DepartmentUpdateSerializer,
    HospitalCreateSerializer,
    HospitalRefSerializer,
    HospitalResetSerializer,
    HospitalUpdateSerializer,
)
from ..services import hospitals as service
from ..services.store import get_store
from .common import current_tree, require_department, require_hospital, respond


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAdminRole])
def add_hospital(request):
    s = HospitalCreateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    vd = s.validated_data
    result = service.add_hospital(
        get_store(),
        name=vd['name'],
        province=vd['province'],
        city=vd['city'],
        supervisor_name=vd['supervisorName'],
        supervisor_national_id=vd['supervisorNationalId'],
        supervisor_password=vd['supervisorPassword'],
    )
    return respond(request, result, status=201)


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsHospitalRole])
def update_hospital(request):
    s = HospitalUpdateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    changes = dict(s.validated_data)
    hospital_id = changes.pop('hospitalId')
    ensure(can_manage_hospital(request.user, hospital_id))
    require_hospital(current_tree(), hospital_id)
    return respond(request, service.update_hospital(get_store(), hospital_id, changes))


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAdminRole])
def delete_hospital(request):
    s = HospitalRefSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    hospital_id = s.validated_data['hospitalId']
    return respond(request, service.delete_hospital(get_store(), hospital_id))


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsHospitalRole])
def reset_hospital(request):
    """Remove every department of a hospital after re-entering the supervisor credentials."""
    s = HospitalResetSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    vd = s.validated_data
    ensure(can_manage_hospital(request.user, vd['hospitalId']))
    result = service.reset_hospital(
        get_store(), current_tree(), vd['hospitalId'],
        supervisor_national_id=vd['supervisorNationalId'],
        supervisor_password=vd['supervisorPassword'],
    )
    return respond(request, result)


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsHospitalRole])
def add_department(request):
    s = DepartmentCreateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    vd = s.validated_data
    ensure(can_manage_hospital(request.user, vd['hospitalId']))
    require_hospital(current_tree(), vd['hospitalId'])
    result = service.add_department(
        get_store(), vd['hospitalId'],
        name=vd['name'],
        manager_name=vd['managerName'],
        manager_national_id=vd['managerNationalId'],
        manager_password=vd['managerPassword'],
        staff_count=vd['staffCount'],
        bed_count=vd['bedCount'],
    )
    return respond(request, result, status=201)


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsDepartmentRole])
def update_department(request):
    s = DepartmentUpdateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    changes = dict(s.validated_data)
    hospital_id = changes.pop('hospitalId')
    department_id = changes.pop('departmentId')
    ensure(can_manage_department(request.user, hospital_id, department_id))
    require_department(current_tree(), hospital_id, department_id)
    return respond(request, service.update_department(get_store(), hospital_id, department_id, changes))


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsHospitalRole])
def delete_department(request):
    s = DepartmentRefSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    vd = s.validated_data
    ensure(can_manage_hospital(request.user, vd['hospitalId']))
    require_department(current_tree(), vd['hospitalId'], vd['departmentId'])
    return respond(request, service.delete_department(get_store(), vd['departmentId']))
