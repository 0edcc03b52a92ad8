"""
Hospital and department handlers.

Field edits of hospitals and departments wait for the store to echo the
updated row and are then merged into the tree locally; every other
handler resyncs.
"""
from __future__ import annotations

from typing import Any

from ..exceptions import MutationError, StoreError
from .mutations import MERGE, MutationResult, delete_row, new_id
from .normalize import department_from_row, hospital_from_row, to_row
from .store import Store
from .tree import find_department, find_hospital

HOSPITAL_FIELDS = ('name', 'province', 'city', 'supervisorName', 'supervisorNationalId', 'supervisorPassword')
DEPARTMENT_FIELDS = ('name', 'managerName', 'managerNationalId', 'managerPassword', 'staffCount', 'bedCount')


def _only(changes: dict[str, Any], allowed: tuple[str, ...]) -> dict[str, Any]:
    return {k: v for k, v in changes.items() if k in allowed}


def add_hospital(store: Store, *, name: str, province: str, city: str, supervisor_name: str,
                 supervisor_national_id: str, supervisor_password: str) -> MutationResult:
    row = {
        'id': new_id('hosp'),
        'name': name,
        'province': province,
        'city': city,
        'supervisor_name': supervisor_name,
        'supervisor_national_id': supervisor_national_id,
        'supervisor_password': supervisor_password,
        'admin_messages': [],
    }
    try:
        inserted = store.insert('hospitals', row)
    except StoreError as exc:
        raise MutationError(f"خطا در افزودن بیمارستان: {exc}") from exc
    return MutationResult('add', 'hospitals', entity=hospital_from_row(inserted))


def update_hospital(store: Store, hospital_id: str, changes: dict[str, Any]) -> MutationResult:
    changes = _only(changes, HOSPITAL_FIELDS)
    if not changes:
        raise MutationError('Nothing to update.')
    try:
        rows = store.update('hospitals', to_row(changes), match={'id': hospital_id})
    except StoreError as exc:
        raise MutationError(f"Failed to update hospital: {exc}") from exc
    if not rows:
        raise MutationError('Hospital not found or not updated.')

    def apply(hospitals: list[dict]) -> None:
        hospital = find_hospital(hospitals, hospital_id)
        if hospital is not None:
            hospital.update(changes)

    return MutationResult('update', 'hospitals', entity={'id': hospital_id, **changes}, patch=apply, strategy=MERGE)


def delete_hospital(store: Store, hospital_id: str) -> MutationResult:
    delete_row(store, 'hospitals', hospital_id, 'hospital')
    return MutationResult('delete', 'hospitals', entity={'id': hospital_id})


def reset_hospital(store: Store, hospitals: list[dict], hospital_id: str, *,
                   supervisor_national_id: str, supervisor_password: str) -> MutationResult:
    """Delete every department of a hospital after re-checking the supervisor."""
    hospital = find_hospital(hospitals, hospital_id)
    if hospital is None:
        raise MutationError('Hospital not found.')
    if (hospital.get('supervisorNationalId') != supervisor_national_id
            or hospital.get('supervisorPassword') != supervisor_password):
        raise MutationError('Supervisor credentials do not match.')
    try:
        store.delete('departments', match={'hospital_id': hospital_id})
    except StoreError as exc:
        raise MutationError('Failed to reset hospital departments.') from exc

    def apply(tree: list[dict]) -> None:
        target = find_hospital(tree, hospital_id)
        if target is not None:
            target['departments'] = []

    return MutationResult('reset', 'departments', entity={'id': hospital_id}, patch=apply, strategy=MERGE)


def add_department(store: Store, hospital_id: str, *, name: str, manager_name: str, manager_national_id: str,
                   manager_password: str, staff_count: int, bed_count: int) -> MutationResult:
    row = {
        'id': new_id('dept'),
        'hospital_id': hospital_id,
        'name': name,
        'manager_name': manager_name,
        'manager_national_id': manager_national_id,
        'manager_password': manager_password,
        'staff_count': staff_count,
        'bed_count': bed_count,
    }
    try:
        inserted = store.insert('departments', row)
    except StoreError as exc:
        raise MutationError(f"Failed to add department: {exc}") from exc
    return MutationResult('add', 'departments', entity=department_from_row(inserted))


def update_department(store: Store, hospital_id: str, department_id: str, changes: dict[str, Any]) -> MutationResult:
    changes = _only(changes, DEPARTMENT_FIELDS)
    if not changes:
        raise MutationError('Nothing to update.')
    try:
        rows = store.update('departments', to_row(changes), match={'id': department_id})
    except StoreError as exc:
        raise MutationError(f"Failed to update department: {exc}") from exc
    if not rows:
        raise MutationError('Department not found or not updated.')

    def apply(hospitals: list[dict]) -> None:
        department = find_department(find_hospital(hospitals, hospital_id), department_id)
        if department is not None:
            department.update(changes)

    return MutationResult('update', 'departments', entity={'id': department_id, **changes}, patch=apply, strategy=MERGE)


def delete_department(store: Store, department_id: str) -> MutationResult:
    delete_row(store, 'departments', department_id, 'department')
    return MutationResult('delete', 'departments', entity={'id': department_id})
