"""Patient chat and the hospital/admin message thread."""
from __future__ import annotations

from rest_framework.decorators import api_view, parser_classes, permission_classes
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.permissions import IsAuthenticated

from ..permissions import IsNotStaff, can_access_patient, can_manage_hospital, ensure
from ..serializers.chat import ChatSendSerializer
from ..services.chat import send_message
from ..services.credentials import ADMIN, MANAGER, PATIENT, SUPERVISOR
from ..services.store import get_store
from .common import current_tree, respond

SENDER_BY_ROLE = {
    PATIENT: 'patient',
    MANAGER: 'manager',
    SUPERVISOR: 'hospital',
    ADMIN: 'admin',
}


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsNotStaff])
@parser_classes([JSONParser, MultiPartParser, FormParser])
def send_chat_message(request):
    """Send a message with optional text and optional attachment.

    With ``patientId`` the message joins that patient's chat, otherwise the
    hospital's admin thread.  The sender tag follows the caller's role.
    """
    s = ChatSendSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    vd = s.validated_data
    principal = request.user
    if vd.get('patientId'):
        ensure(can_access_patient(principal, vd['hospitalId'], vd['departmentId'], vd['patientId']))
    else:
        ensure(can_manage_hospital(principal, vd['hospitalId']))

    file = None
    if vd.get('file') is not None:
        upload = vd['file']
        file = {'name': upload.name, 'type': upload.content_type, 'content': upload.read()}

    result = send_message(
        get_store(), current_tree(),
        hospital_id=vd['hospitalId'],
        sender=SENDER_BY_ROLE[principal.role],
        text=vd.get('text'),
        file=file,
        department_id=vd.get('departmentId'),
        patient_id=vd.get('patientId'),
    )
    return respond(request, result, status=201)
