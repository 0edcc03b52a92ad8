"""Local backup of the hospital tree as a downloadable JSON file."""
from __future__ import annotations

import json
from datetime import datetime
from typing import Optional, Union

from django.utils import timezone

from ..exceptions import BackupError
from .normalize import ensure_collections

PARSE_ERROR = 'Failed to load or parse the backup file.'

HOSPITAL_RECORDS = ('departments', 'checklistTemplates', 'examTemplates', 'accreditationMaterials',
                    'newsBanners', 'adminMessages')
DEPARTMENT_RECORDS = ('staff', 'patientEducationMaterials', 'patients')
STAFF_RECORDS = ('assessments', 'workLogs')
PATIENT_RECORDS = ('chatHistory',)


def backup_filename(now: Optional[datetime] = None) -> str:
    now = now or timezone.now()
    stamp = now.strftime('%Y-%m-%dT%H:%M:%S.') + f"{now.microsecond // 1000:03d}Z"
    return f"my-hospital-backup-{stamp.replace(':', '-')}.json"


def dump_backup(hospitals: list[dict], now: Optional[datetime] = None) -> tuple[str, bytes]:
    if not hospitals:
        raise BackupError('No data to save.')
    content = json.dumps(hospitals, ensure_ascii=False, indent=2).encode('utf-8')
    return backup_filename(now), content


def _records(owner: dict, key: str) -> list[dict]:
    """Return ``owner[key]`` when it is absent/null or a list of records with an id."""
    value = owner.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise BackupError(PARSE_ERROR)
    for item in value:
        if not isinstance(item, dict) or not item.get('id'):
            raise BackupError(PARSE_ERROR)
    return value


def _check_hospital(hospital) -> None:
    if not isinstance(hospital, dict) or not hospital.get('id') or not hospital.get('name'):
        raise BackupError(PARSE_ERROR)
    for key in HOSPITAL_RECORDS:
        _records(hospital, key)
    months = hospital.get('trainingMaterials')
    if months is not None:
        if not isinstance(months, list):
            raise BackupError(PARSE_ERROR)
        for bucket in months:
            if not isinstance(bucket, dict) or not bucket.get('month'):
                raise BackupError(PARSE_ERROR)
            _records(bucket, 'materials')
    for department in _records(hospital, 'departments'):
        for key in DEPARTMENT_RECORDS:
            _records(department, key)
        for member in _records(department, 'staff'):
            for key in STAFF_RECORDS:
                _records(member, key)
        for patient in _records(department, 'patients'):
            for key in PATIENT_RECORDS:
                _records(patient, key)


def parse_backup(raw: Union[str, bytes, list]) -> list[dict]:
    """Validate a backup and return it as a tree with every collection present.

    Every hospital needs a non-empty ``id`` and ``name``; every nested
    collection must be a list of records carrying an ``id``.
    """
    if isinstance(raw, (str, bytes)):
        try:
            data = json.loads(raw)
        except ValueError as exc:
            raise BackupError(PARSE_ERROR) from exc
    else:
        data = raw
    if not isinstance(data, list):
        raise BackupError(PARSE_ERROR)
    for hospital in data:
        _check_hospital(hospital)
    return ensure_collections(data)
