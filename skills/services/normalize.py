"""
Reshape the nested hospital query into the domain tree.

The store answers with snake_case rows where embedded collections may be
missing or ``null``.  The domain tree uses camelCase keys and always
carries every child collection as a list.  Training materials share one
table and are told apart by ``material_type``; monthly staff training is
further grouped by its ``month`` label.
"""
from __future__ import annotations

import re
from typing import Any, Iterable, Optional

MONTHLY_STAFF = 'monthly_staff'
ACCREDITATION = 'accreditation'
PATIENT_EDUCATION = 'patient_education'
MATERIAL_TYPES = (MONTHLY_STAFF, ACCREDITATION, PATIENT_EDUCATION)

MATERIAL_COLUMNS = 'id, name, type, description, file_path, material_type'

# Admin messages and patient chat history are JSON columns of their rows.
HOSPITAL_TREE_SELECT = f"""*,
  departments (*,
    staff:staff_members (*,
      assessments (*),
      work_logs (*)
    ),
    patients (*),
    patient_education_materials:training_materials ({MATERIAL_COLUMNS})
  ),
  checklist_templates (*),
  exam_templates (*),
  training_materials (*),
  accreditation_materials:training_materials ({MATERIAL_COLUMNS}),
  news_banners (*)
"""

TREE_FILTERS = {
    'training_materials.material_type': MONTHLY_STAFF,
    'accreditation_materials.material_type': ACCREDITATION,
    'departments.patient_education_materials.material_type': PATIENT_EDUCATION,
}

HOSPITAL_COLLECTIONS = (
    'departments', 'checklistTemplates', 'examTemplates', 'trainingMaterials',
    'accreditationMaterials', 'newsBanners', 'adminMessages',
)
DEPARTMENT_COLLECTIONS = ('staff', 'patientEducationMaterials', 'patients')

_SNAKE = re.compile(r'_([a-z0-9])')
_CAMEL = re.compile(r'([A-Z])')


def camel(key: str) -> str:
    return _SNAKE.sub(lambda m: m.group(1).upper(), key)


def snake(key: str) -> str:
    return _CAMEL.sub(lambda m: '_' + m.group(1).lower(), key)


def camelize(value: Any) -> Any:
    """Rename dict keys to camelCase, recursively."""
    if isinstance(value, dict):
        return {camel(str(k)): camelize(v) for k, v in value.items()}
    if isinstance(value, list):
        return [camelize(v) for v in value]
    return value


def to_row(values: dict[str, Any]) -> dict[str, Any]:
    """Rename the top-level keys of a domain record to wire columns."""
    return {snake(k): v for k, v in values.items()}


def _rows(value: Optional[Iterable[dict]]) -> list[dict]:
    return list(value or [])


def _of_type(rows: Iterable[dict], material_type: str) -> list[dict]:
    return [r for r in rows if r.get('material_type') in (None, material_type)]


def material_from_row(row: dict) -> dict:
    return {
        'id': row.get('id'),
        'name': row.get('name'),
        'type': row.get('type'),
        'filePath': row.get('file_path'),
        'description': row.get('description'),
    }


def banner_from_row(row: dict) -> dict:
    return {
        'id': row.get('id'),
        'title': row.get('title'),
        'description': row.get('description'),
        'imagePath': row.get('image_path'),
    }


def group_by_month(rows: Iterable[dict]) -> list[dict]:
    """Bucket monthly staff materials by month, in first-appearance order.

    Rows without a month belong to no bucket and are dropped.
    """
    buckets: dict[str, list[dict]] = {}
    for row in _of_type(rows, MONTHLY_STAFF):
        month = row.get('month')
        if not month:
            continue
        buckets.setdefault(month, []).append(material_from_row(row))
    return [{'month': month, 'materials': materials} for month, materials in buckets.items()]


def staff_from_row(row: dict) -> dict:
    return {
        'id': row.get('id'),
        'name': row.get('name'),
        'title': row.get('title'),
        'nationalId': row.get('national_id'),
        'password': row.get('password'),
        'assessments': camelize(_rows(row.get('assessments'))),
        'workLogs': camelize(_rows(row.get('work_logs'))),
    }


def patient_from_row(row: dict) -> dict:
    return {
        'id': row.get('id'),
        'name': row.get('name'),
        'nationalId': row.get('national_id'),
        'password': row.get('password'),
        'chatHistory': camelize(_rows(row.get('chat_history'))),
    }


def department_from_row(row: dict) -> dict:
    return {
        'id': row.get('id'),
        'name': row.get('name'),
        'managerName': row.get('manager_name'),
        'managerNationalId': row.get('manager_national_id'),
        'managerPassword': row.get('manager_password'),
        'staffCount': row.get('staff_count'),
        'bedCount': row.get('bed_count'),
        'staff': [staff_from_row(s) for s in _rows(row.get('staff'))],
        'patientEducationMaterials': [
            material_from_row(m)
            for m in _of_type(_rows(row.get('patient_education_materials')), PATIENT_EDUCATION)
        ],
        'patients': [patient_from_row(p) for p in _rows(row.get('patients'))],
    }


def hospital_from_row(row: dict) -> dict:
    return {
        'id': row.get('id'),
        'name': row.get('name'),
        'province': row.get('province'),
        'city': row.get('city'),
        'supervisorName': row.get('supervisor_name'),
        'supervisorNationalId': row.get('supervisor_national_id'),
        'supervisorPassword': row.get('supervisor_password'),
        'departments': [department_from_row(d) for d in _rows(row.get('departments'))],
        'checklistTemplates': camelize(_rows(row.get('checklist_templates'))),
        'examTemplates': camelize(_rows(row.get('exam_templates'))),
        'trainingMaterials': group_by_month(_rows(row.get('training_materials'))),
        'accreditationMaterials': [
            material_from_row(m)
            for m in _of_type(_rows(row.get('accreditation_materials')), ACCREDITATION)
        ],
        'newsBanners': [banner_from_row(b) for b in _rows(row.get('news_banners'))],
        'adminMessages': camelize(_rows(row.get('admin_messages'))),
    }


def normalize_hospitals(rows: Iterable[dict]) -> list[dict]:
    return [hospital_from_row(h) for h in rows]


def ensure_collections(hospitals: list[dict]) -> list[dict]:
    """Fill in missing child collections of an externally supplied tree."""
    for hospital in hospitals:
        for key in HOSPITAL_COLLECTIONS:
            if hospital.get(key) is None:
                hospital[key] = []
        for department in hospital['departments']:
            for key in DEPARTMENT_COLLECTIONS:
                if department.get(key) is None:
                    department[key] = []
            for member in department['staff']:
                for key in ('assessments', 'workLogs'):
                    if member.get(key) is None:
                        member[key] = []
            for patient in department['patients']:
                if patient.get('chatHistory') is None:
                    patient['chatHistory'] = []
    return hospitals
