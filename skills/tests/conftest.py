import copy

import pytest
from django.core.cache import cache
from rest_framework.test import APIClient

from skills.exceptions import StoreError
from skills.services.store import Store, set_store

STORE_URL = 'https://example.supabase.co'


class FakeStore(Store):
    """In-memory stand-in for the hosted store.

    Tables are flat lists of snake_case rows; the nested hospital select is
    assembled from them the way the store embeds related rows.  Operations
    named in ``failures`` (``"upload"``, ``"remove"``, ``"select"`` or
    ``"<op>:<table>"``) raise :class:`StoreError`.
    """

    TABLES = (
        'hospitals', 'departments', 'staff_members', 'assessments', 'work_logs', 'patients',
        'training_materials', 'news_banners', 'checklist_templates', 'exam_templates',
    )

    def __init__(self):
        super().__init__(client=None, bucket='materials')
        self.tables = {name: [] for name in self.TABLES}
        self.objects = {}
        self.calls = []
        self.failures = set()

    def _check(self, op, table=None):
        self.calls.append((op, table))
        if op in self.failures or (table and f"{op}:{table}" in self.failures):
            raise StoreError(f"{op} failed")

    @staticmethod
    def _matches(row, match):
        return all(row.get(k) == v for k, v in match.items())

    # tables
    def select(self, table, columns='*', filters=None):
        self._check('select', table)
        if table == 'hospitals' and columns != '*':
            return [self._nested_hospital(h) for h in self.tables['hospitals']]
        return copy.deepcopy([r for r in self.tables[table] if self._matches(r, filters or {})])

    def insert(self, table, row):
        self._check('insert', table)
        self.tables[table].append(copy.deepcopy(row))
        return copy.deepcopy(row)

    def upsert(self, table, row):
        self._check('upsert', table)
        rows = self.tables[table]
        for i, existing in enumerate(rows):
            if existing['id'] == row['id']:
                rows[i] = {**existing, **copy.deepcopy(row)}
                return copy.deepcopy(rows[i])
        rows.append(copy.deepcopy(row))
        return copy.deepcopy(row)

    def update(self, table, values, *, match):
        self._check('update', table)
        updated = []
        for row in self.tables[table]:
            if self._matches(row, match):
                row.update(copy.deepcopy(values))
                updated.append(copy.deepcopy(row))
        return updated

    def delete(self, table, *, match):
        self._check('delete', table)
        kept, deleted = [], []
        for row in self.tables[table]:
            (deleted if self._matches(row, match) else kept).append(row)
        self.tables[table] = kept
        return deleted

    def ping(self):
        self._check('ping')
        return True

    # storage
    def upload(self, path, content, content_type):
        self._check('upload')
        self.objects[path] = (content, content_type)
        return path

    def remove(self, paths):
        self._check('remove')
        for path in paths:
            self.objects.pop(path, None)

    def public_url(self, path):
        return f"{STORE_URL}/storage/v1/object/public/{self.bucket}/{path}"

    def signed_upload(self, path):
        self._check('signed_upload')
        return {'path': path, 'token': 'upload-token', 'signedUrl': f"{STORE_URL}/upload/{path}?token=upload-token"}

    # nested select
    def _children(self, table, **match):
        return copy.deepcopy([r for r in self.tables[table] if self._matches(r, match)])

    def _nested_hospital(self, hospital):
        row = copy.deepcopy(hospital)
        departments = []
        for d in self._children('departments', hospital_id=hospital['id']):
            staff = []
            for s in self._children('staff_members', department_id=d['id']):
                s['assessments'] = self._children('assessments', staff_member_id=s['id'])
                s['work_logs'] = self._children('work_logs', staff_member_id=s['id'])
                staff.append(s)
            d['staff'] = staff
            d['patients'] = self._children('patients', department_id=d['id'])
            d['patient_education_materials'] = self._children(
                'training_materials', department_id=d['id'], material_type='patient_education')
            departments.append(d)
        row['departments'] = departments
        row['checklist_templates'] = self._children('checklist_templates', hospital_id=hospital['id'])
        row['exam_templates'] = self._children('exam_templates', hospital_id=hospital['id'])
        row['training_materials'] = self._children(
            'training_materials', hospital_id=hospital['id'], material_type='monthly_staff')
        row['accreditation_materials'] = self._children(
            'training_materials', hospital_id=hospital['id'], material_type='accreditation')
        row['news_banners'] = self._children('news_banners', hospital_id=hospital['id'])
        return row


def seed(store):
    """Two hospitals; the first has one department with a staff member and a patient."""
    store.tables['hospitals'] += [
        {'id': 'h1', 'name': 'بیمارستان امام', 'province': 'تهران', 'city': 'تهران',
         'supervisor_name': 'سارا', 'supervisor_national_id': '123', 'supervisor_password': 'pw',
         'admin_messages': []},
        {'id': 'h2', 'name': 'بیمارستان سینا', 'province': 'تهران', 'city': 'تهران',
         'supervisor_name': 'رضا', 'supervisor_national_id': '222', 'supervisor_password': 'pw2',
         'admin_messages': None},
    ]
    store.tables['departments'].append(
        {'id': 'd1', 'hospital_id': 'h1', 'name': 'اورژانس', 'manager_name': 'مریم',
         'manager_national_id': '456', 'manager_password': 'mpw', 'staff_count': 10, 'bed_count': 20})
    store.tables['staff_members'].append(
        {'id': 's1', 'department_id': 'd1', 'name': 'علی', 'title': 'پرستار',
         'national_id': '789', 'password': 'spw'})
    store.tables['patients'].append(
        {'id': 'p1', 'department_id': 'd1', 'name': 'حسن', 'national_id': '111', 'password': 'ppw',
         'chat_history': []})
    store.tables['training_materials'] += [
        {'id': 'mat-1', 'hospital_id': 'h1', 'department_id': None, 'material_type': 'accreditation',
         'month': None, 'name': 'guide.pdf', 'type': 'application/pdf', 'description': '',
         'file_path': 'h1/accreditation/mat-1-guide.pdf'},
        {'id': 'mat-2', 'hospital_id': 'h1', 'department_id': None, 'material_type': 'monthly_staff',
         'month': 'فروردین', 'name': 'cpr.mp4', 'type': 'video/mp4', 'description': 'CPR',
         'file_path': 'h1/monthly_staff/mat-2-cpr.mp4'},
    ]
    store.objects['h1/accreditation/mat-1-guide.pdf'] = (b'%PDF', 'application/pdf')
    store.objects['h1/monthly_staff/mat-2-cpr.mp4'] = (b'\x00', 'video/mp4')
    return store


@pytest.fixture(autouse=True)
def store(settings):
    settings.SUPABASE_URL = STORE_URL
    settings.SUPABASE_ANON_KEY = 'anon-key'
    cache.clear()
    fake = FakeStore()
    set_store(fake)
    yield fake
    set_store(None)
    cache.clear()


@pytest.fixture
def seeded(store):
    return seed(store)


@pytest.fixture
def client():
    return APIClient()


def login(client, national_id, password):
    return client.post('/api/auth/login', {'nationalId': national_id, 'password': password}, format='json')


@pytest.fixture
def admin_client(client, seeded):
    assert login(client, '5850008985', '64546').status_code == 200
    return client


@pytest.fixture
def supervisor_client(client, seeded):
    assert login(client, '123', 'pw').status_code == 200
    return client


@pytest.fixture
def manager_client(client, seeded):
    assert login(client, '456', 'mpw').status_code == 200
    return client
