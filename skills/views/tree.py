"""
Read access to the hospital tree.

The global admin sees every hospital.  Every other principal sees only its
own hospital; staff members and patients get it without credentials.  Staff
see no patient chat thread, and a patient sees no other patient and no admin
thread.
"""
from __future__ import annotations

from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ..services.credentials import ADMIN, PATIENT, STAFF
from ..services.materials import banner_urls
from ..services.store import get_store
from ..services.tree import tree_store

SECRET_KEYS = {'password', 'supervisorPassword', 'managerPassword'}


def redact(value):
    if isinstance(value, dict):
        return {k: redact(v) for k, v in value.items() if k not in SECRET_KEYS}
    if isinstance(value, list):
        return [redact(v) for v in value]
    return value


def scoped_hospitals(principal, hospitals: list[dict]) -> list[dict]:
    if principal.role == ADMIN:
        return hospitals
    visible = [h for h in hospitals if h['id'] == principal.hospital_id]
    if principal.role == PATIENT:
        for hospital in visible:
            hospital['adminMessages'] = []
            for department in hospital['departments']:
                department['patients'] = [p for p in department['patients'] if p['id'] == principal.patient_id]
    if principal.role == STAFF:
        for hospital in visible:
            for department in hospital['departments']:
                for patient in department['patients']:
                    patient['chatHistory'] = []
    if principal.role in (STAFF, PATIENT):
        return redact(visible)
    return visible


def _with_banner_urls(store, hospitals: list[dict]) -> list[dict]:
    for hospital in hospitals:
        urls = banner_urls(store, hospital.get('newsBanners') or [])
        for banner in hospital.get('newsBanners') or []:
            banner['imageUrl'] = urls.get(banner['id'])
    return hospitals


def _tree_payload(request, snapshot: dict) -> dict:
    hospitals = scoped_hospitals(request.user, snapshot['hospitals'])
    return {
        'ok': snapshot['error'] is None,
        'loaded': snapshot['loaded'],
        'error': snapshot['error'],
        'version': snapshot['version'],
        'updatedAt': snapshot['updatedAt'],
        'hospitals': _with_banner_urls(get_store(), hospitals),
    }


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def get_hospitals(request):
    """Return the (scoped) hospital tree, fetching it on first use.

    A failed fetch still answers 200 with the previous tree and ``error`` set.
    """
    tree_store.ensure_loaded(get_store())
    return Response(_tree_payload(request, tree_store.snapshot()))


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def refresh_hospitals(request):
    """Refetch the whole tree from the store."""
    tree_store.resync(get_store())
    return Response(_tree_payload(request, tree_store.snapshot()))
