"""Navigation state endpoints; the state itself lives in the session."""
from __future__ import annotations

from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from ..permissions import can_access_staff, can_manage_department, can_view_hospital, ensure
from ..serializers.navigation import (
    OpenViewSerializer,
    SelectDepartmentSerializer,
    SelectHospitalSerializer,
    SelectStaffSerializer,
)
from ..services import navigation as nav
from .common import current_tree, require_department, require_hospital, require_staff

NAV_SESSION_KEY = 'nav'


def load_nav(request) -> nav.NavState:
    return nav.NavState.from_dict(request.session.get(NAV_SESSION_KEY))


def save_nav(request, state: nav.NavState) -> None:
    request.session[NAV_SESSION_KEY] = state.to_dict()


def _reply(request, state: nav.NavState) -> Response:
    save_nav(request, state)
    return Response({'ok': True, 'nav': state.as_payload()})


@api_view(['GET'])
@permission_classes([AllowAny])
def nav_state(request):
    return Response({'ok': True, 'nav': load_nav(request).as_payload()})


@api_view(['POST'])
@permission_classes([AllowAny])
def nav_back(request):
    return _reply(request, nav.back(load_nav(request)))


@api_view(['POST'])
@permission_classes([AllowAny])
def nav_welcome(request):
    return _reply(request, nav.go_to_welcome())


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def nav_select_hospital(request):
    s = SelectHospitalSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    hospital_id = s.validated_data['hospitalId']
    ensure(can_view_hospital(request.user, hospital_id))
    require_hospital(current_tree(), hospital_id)
    return _reply(request, nav.select_hospital(load_nav(request), hospital_id))


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def nav_select_department(request):
    s = SelectDepartmentSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    state = load_nav(request)
    department_id = s.validated_data['departmentId']
    ensure(can_manage_department(request.user, state.hospital_id, department_id)
           or request.user.department_id == department_id)
    require_department(current_tree(), state.hospital_id, department_id)
    return _reply(request, nav.select_department(state, department_id))


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def nav_select_staff(request):
    s = SelectStaffSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    state = load_nav(request)
    staff_id = s.validated_data['staffId']
    ensure(can_access_staff(request.user, state.hospital_id, state.department_id, staff_id))
    require_staff(current_tree(), state.hospital_id, state.department_id, staff_id)
    return _reply(request, nav.select_staff(state, staff_id))


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def nav_open(request):
    s = OpenViewSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    return _reply(request, nav.open_view(load_nav(request), s.validated_data['view']))
