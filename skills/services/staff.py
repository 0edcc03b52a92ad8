"""Staff, patient, assessment and monthly work-log handlers."""
from __future__ import annotations

from typing import Any

from ..exceptions import MutationError, StoreError
from .mutations import MutationResult, delete_row, new_id, save_record
from .normalize import camelize, patient_from_row, staff_from_row, to_row
from .store import Store

STAFF_FIELDS = ('name', 'title', 'nationalId', 'password')


def add_staff(store: Store, department_id: str, *, name: str, title: str, national_id: str,
              password: str) -> MutationResult:
    row = {
        'id': new_id('staff'),
        'department_id': department_id,
        'name': name,
        'title': title,
        'national_id': national_id,
        'password': password,
    }
    try:
        inserted = store.insert('staff_members', row)
    except StoreError as exc:
        raise MutationError(f"Failed to add staff member: {exc}") from exc
    return MutationResult('add', 'staff_members', entity=staff_from_row(inserted))


def update_staff(store: Store, staff_id: str, changes: dict[str, Any]) -> MutationResult:
    changes = {k: v for k, v in changes.items() if k in STAFF_FIELDS}
    if not changes:
        raise MutationError('Nothing to update.')
    try:
        rows = store.update('staff_members', to_row(changes), match={'id': staff_id})
    except StoreError as exc:
        raise MutationError(f"Failed to update staff member: {exc}") from exc
    if not rows:
        raise MutationError('Staff member not found or not updated.')
    return MutationResult('update', 'staff_members', entity=staff_from_row(rows[0]))


def delete_staff(store: Store, staff_id: str) -> MutationResult:
    delete_row(store, 'staff_members', staff_id, 'staff member')
    return MutationResult('delete', 'staff_members', entity={'id': staff_id})


def add_patient(store: Store, department_id: str, *, name: str, national_id: str, password: str) -> MutationResult:
    row = {
        'id': new_id('patient'),
        'department_id': department_id,
        'name': name,
        'national_id': national_id,
        'password': password,
        'chat_history': [],
    }
    try:
        inserted = store.insert('patients', row)
    except StoreError as exc:
        raise MutationError(f"Failed to add patient: {exc}") from exc
    return MutationResult('add', 'patients', entity=patient_from_row(inserted))


def delete_patient(store: Store, patient_id: str) -> MutationResult:
    delete_row(store, 'patients', patient_id, 'patient')
    return MutationResult('delete', 'patients', entity={'id': patient_id})


def save_assessment(store: Store, staff_id: str, assessment: dict[str, Any]) -> MutationResult:
    """Add an assessment of a staff member, or replace it when ``id`` is given."""
    saved = save_record(store, 'assessments', 'asmt', {'staff_member_id': staff_id}, assessment)
    return MutationResult('save', 'assessments', entity=camelize(saved))


def save_work_log(store: Store, staff_id: str, work_log: dict[str, Any]) -> MutationResult:
    """Add a monthly work log of a staff member, or replace it when ``id`` is given."""
    saved = save_record(store, 'work_logs', 'wlog', {'staff_member_id': staff_id}, work_log)
    return MutationResult('save', 'work_logs', entity=camelize(saved))
