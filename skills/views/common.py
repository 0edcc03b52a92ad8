"""
Helpers shared by the API views: tree access, scope lookups and the
commit-and-respond step of every mutation.
"""
from __future__ import annotations

from typing import Optional

from rest_framework.exceptions import NotFound
from rest_framework.response import Response

from ..services.audit import log_action
from ..services.mutations import MutationResult, commit
from ..services.store import get_store
from ..services.tree import find_department, find_hospital, find_patient, find_staff, tree_store


def current_tree() -> list[dict]:
    """Return a copy of the hospital tree, fetching it on first use."""
    tree_store.ensure_loaded(get_store())
    return tree_store.hospitals()


def require_hospital(hospitals: list[dict], hospital_id: str) -> dict:
    hospital = find_hospital(hospitals, hospital_id)
    if hospital is None:
        raise NotFound('Hospital not found.')
    return hospital


def require_department(hospitals: list[dict], hospital_id: str, department_id: str) -> dict:
    department = find_department(require_hospital(hospitals, hospital_id), department_id)
    if department is None:
        raise NotFound('Department not found.')
    return department


def require_staff(hospitals: list[dict], hospital_id: str, department_id: str, staff_id: str) -> dict:
    member = find_staff(require_department(hospitals, hospital_id, department_id), staff_id)
    if member is None:
        raise NotFound('Staff member not found.')
    return member


def require_patient(hospitals: list[dict], hospital_id: str, department_id: str, patient_id: str) -> dict:
    patient = find_patient(require_department(hospitals, hospital_id, department_id), patient_id)
    if patient is None:
        raise NotFound('Patient not found.')
    return patient


def respond(request, result: MutationResult, *, status: int = 200, detail: Optional[dict] = None) -> Response:
    """Commit a handler result to the tree, audit it and build the response."""
    commit(result, store=get_store())
    entity_id = (result.entity or {}).get('id')
    log_action(principal=request.user, action=f"{result.table}.{result.action}",
               object_type=result.table, object_id=entity_id, detail=detail)
    return Response(result.as_payload(), status=status)


def require_owned(records: list[dict], record_id: str, message: str) -> dict:
    """Return the record with ``record_id`` from a scoped collection, else 404."""
    record = next((r for r in records if r.get('id') == record_id), None)
    if record is None:
        raise NotFound(message)
    return record
