"""
Credential index and role resolution.

Every principal able to log in is listed in one flat mapping from
``(nationalId, password)`` to :class:`Principal`.  The mapping is built
once per fetch by walking the role tiers in precedence order; the first
principal registered for a pair keeps it, so duplicate credentials
resolve to the higher tier (and, within a tier, to the earlier entry in
tree order).
"""
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Iterable, Iterator, Optional

from django.conf import settings

ADMIN = 'admin'
SUPERVISOR = 'supervisor'
MANAGER = 'manager'
STAFF = 'staff'
PATIENT = 'patient'

ROLE_TIERS = (ADMIN, SUPERVISOR, MANAGER, STAFF, PATIENT)


@dataclass(frozen=True)
class Principal:
    role: str
    name: str
    hospital_id: Optional[str] = None
    department_id: Optional[str] = None
    staff_id: Optional[str] = None
    patient_id: Optional[str] = None

    # DRF treats the authenticated principal as request.user
    is_authenticated = True

    @property
    def pk(self) -> str:
        return ':'.join(str(v or '') for v in (self.role, self.hospital_id, self.department_id,
                                               self.staff_id, self.patient_id))

    @property
    def is_admin(self) -> bool:
        return self.role == ADMIN

    def scope(self) -> dict:
        return {
            'role': self.role,
            'name': self.name,
            'hospitalId': self.hospital_id,
            'departmentId': self.department_id,
            'staffId': self.staff_id,
            'patientId': self.patient_id,
        }

    def to_session(self) -> dict:
        return asdict(self)

    @classmethod
    def from_session(cls, data: dict) -> 'Principal':
        return cls(**{k: data.get(k) for k in ('role', 'name', 'hospital_id', 'department_id',
                                                'staff_id', 'patient_id')})


Entry = tuple[tuple[str, str], Principal]


def _admin() -> Iterator[Entry]:
    national_id = settings.GLOBAL_ADMIN_NATIONAL_ID
    password = settings.GLOBAL_ADMIN_PASSWORD
    if national_id and password:
        yield (national_id, password), Principal(role=ADMIN, name=settings.GLOBAL_ADMIN_NAME)


def _supervisors(hospitals: list[dict]) -> Iterator[Entry]:
    for h in hospitals:
        yield ((h.get('supervisorNationalId'), h.get('supervisorPassword')),
               Principal(role=SUPERVISOR, name=h.get('supervisorName') or 'سوپروایزر', hospital_id=h['id']))


def _managers(hospitals: list[dict]) -> Iterator[Entry]:
    for h in hospitals:
        for d in h.get('departments') or []:
            yield ((d.get('managerNationalId'), d.get('managerPassword')),
                   Principal(role=MANAGER, name=d.get('managerName') or '', hospital_id=h['id'],
                             department_id=d['id']))


def _staff(hospitals: list[dict]) -> Iterator[Entry]:
    for h in hospitals:
        for d in h.get('departments') or []:
            for s in d.get('staff') or []:
                yield ((s.get('nationalId'), s.get('password')),
                       Principal(role=STAFF, name=s.get('name') or '', hospital_id=h['id'],
                                 department_id=d['id'], staff_id=s['id']))


def _patients(hospitals: list[dict]) -> Iterator[Entry]:
    for h in hospitals:
        for d in h.get('departments') or []:
            for p in d.get('patients') or []:
                yield ((p.get('nationalId'), p.get('password')),
                       Principal(role=PATIENT, name=p.get('name') or '', hospital_id=h['id'],
                                 department_id=d['id'], patient_id=p['id']))


def _tiers(hospitals: list[dict]) -> Iterable[Iterator[Entry]]:
    return (_admin(), _supervisors(hospitals), _managers(hospitals), _staff(hospitals), _patients(hospitals))


class CredentialIndex:
    """Flat ``(nationalId, password) -> Principal`` lookup."""

    def __init__(self, entries: Optional[dict[tuple[str, str], Principal]] = None):
        self._entries = entries or {}

    @classmethod
    def build(cls, hospitals: list[dict]) -> 'CredentialIndex':
        entries: dict[tuple[str, str], Principal] = {}
        for tier in _tiers(hospitals):
            for (national_id, password), principal in tier:
                if not national_id or not password:
                    continue
                entries.setdefault((str(national_id), str(password)), principal)
        return cls(entries)

    def resolve(self, national_id: str, password: str) -> Optional[Principal]:
        """Return the principal owning the pair, or ``None`` for invalid credentials."""
        return self._entries.get((national_id, password))

    def __len__(self) -> int:
        return len(self._entries)


def resolve_credentials(hospitals: list[dict], national_id: str, password: str) -> Optional[Principal]:
    return CredentialIndex.build(hospitals).resolve(national_id, password)
