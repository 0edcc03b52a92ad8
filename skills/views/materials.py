"""
Training materials (monthly staff, accreditation, patient education) and
news banners.  Files arrive as multipart uploads and are stored in the
bucket by the handlers.
"""
from __future__ import annotations

from rest_framework.decorators import api_view, parser_classes, permission_classes
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.permissions import IsAuthenticated

from ..permissions import IsDepartmentRole, IsHospitalRole, can_manage_department, can_manage_hospital, ensure
from ..serializers.materials import (
    BannerCreateSerializer,
    BannerRefSerializer,
    BannerUpdateSerializer,
    MaterialCreateSerializer,
    MaterialDescriptionSerializer,
    MaterialRefSerializer,
)
from ..services import materials as service
from ..services.normalize import PATIENT_EDUCATION
from ..services.store import get_store
from ..services.tree import locate_material
from .common import current_tree, require_department, require_hospital, respond


def _may_manage_material(principal, hospital_id, department) -> bool:
    if department is not None:
        return can_manage_department(principal, hospital_id, department['id'])
    return can_manage_hospital(principal, hospital_id)


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsDepartmentRole])
@parser_classes([MultiPartParser, FormParser])
def add_material(request):
    s = MaterialCreateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    vd = s.validated_data
    hospitals = current_tree()
    if vd['materialType'] == PATIENT_EDUCATION:
        ensure(can_manage_department(request.user, vd['hospitalId'], vd['departmentId']))
        require_department(hospitals, vd['hospitalId'], vd['departmentId'])
    else:
        ensure(can_manage_hospital(request.user, vd['hospitalId']))
        require_hospital(hospitals, vd['hospitalId'])
    upload = vd['file']
    result = service.add_material(
        get_store(),
        hospital_id=vd['hospitalId'],
        material_type=vd['materialType'],
        filename=upload.name,
        content=upload.read(),
        content_type=upload.content_type,
        description=vd['description'],
        month=vd.get('month'),
        department_id=vd.get('departmentId') if vd['materialType'] == PATIENT_EDUCATION else None,
    )
    return respond(request, result, status=201)


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsDepartmentRole])
def delete_material(request):
    s = MaterialRefSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    vd = s.validated_data
    hospitals = current_tree()
    hospital, department, _ = locate_material(hospitals, vd['materialId'])
    if hospital is not None:
        ensure(hospital['id'] == vd['hospitalId']
               and _may_manage_material(request.user, hospital['id'], department))
    return respond(request, service.delete_material(get_store(), hospitals, vd['materialId']))


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsDepartmentRole])
def update_material_description(request):
    s = MaterialDescriptionSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    vd = s.validated_data
    hospital, department, material = locate_material(current_tree(), vd['materialId'])
    ensure(material is not None and hospital['id'] == vd['hospitalId']
           and _may_manage_material(request.user, hospital['id'], department),
           'Material not found in this hospital.')
    return respond(request, service.update_material_description(get_store(), vd['materialId'], vd['description']))


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsHospitalRole])
@parser_classes([MultiPartParser, FormParser])
def add_banner(request):
    s = BannerCreateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    vd = s.validated_data
    ensure(can_manage_hospital(request.user, vd['hospitalId']))
    require_hospital(current_tree(), vd['hospitalId'])
    image = vd['image']
    result = service.add_banner(get_store(), vd['hospitalId'], title=vd['title'], description=vd['description'],
                                filename=image.name, content=image.read(), content_type=image.content_type)
    return respond(request, result, status=201)


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsHospitalRole])
@parser_classes([JSONParser, FormParser])
def update_banner(request):
    s = BannerUpdateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    vd = s.validated_data
    ensure(can_manage_hospital(request.user, vd['hospitalId']))
    hospital = require_hospital(current_tree(), vd['hospitalId'])
    ensure(any(b['id'] == vd['bannerId'] for b in hospital['newsBanners']), 'Banner not found in this hospital.')
    result = service.update_banner(get_store(), vd['bannerId'], title=vd['title'], description=vd['description'])
    return respond(request, result)


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsHospitalRole])
def delete_banner(request):
    s = BannerRefSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    vd = s.validated_data
    ensure(can_manage_hospital(request.user, vd['hospitalId']))
    result = service.delete_banner(get_store(), current_tree(), vd['hospitalId'], vd['bannerId'])
    return respond(request, result)
