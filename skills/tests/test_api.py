import json

import pytest
from django.core.files.uploadedfile import SimpleUploadedFile

from skills.views.auth import INVALID_CREDENTIALS

from .conftest import STORE_URL, login

pytestmark = pytest.mark.django_db


def test_missing_store_configuration_blocks_api(client, settings):
    settings.SUPABASE_URL = ''
    r = client.get('/api/hospitals')
    assert r.status_code == 503
    assert r.json()['error']['code'] == 'configuration_error'


def test_login_supervisor_moves_to_its_hospital(client, seeded):
    r = login(client, '123', 'pw')
    assert r.status_code == 200
    assert r.data['principal']['role'] == 'supervisor'
    assert r.data['nav'] == {'screen': 'main_app', 'view': 'department_list', 'hospitalId': 'h1',
                             'departmentId': None, 'staffId': None}
    me = client.get('/api/auth/me')
    assert me.data['principal']['hospitalId'] == 'h1'


def test_login_invalid_credentials(client, seeded):
    r = login(client, '123', 'nope')
    assert r.status_code == 400
    assert r.data['error']['message'] == INVALID_CREDENTIALS


def test_login_requires_both_fields(client, seeded):
    r = client.post('/api/auth/login', {'nationalId': '123'}, format='json')
    assert r.status_code == 400
    assert r.data['ok'] is False


def test_anonymous_cannot_read_tree(client, seeded):
    assert client.get('/api/hospitals').status_code == 403


def test_admin_sees_every_hospital(admin_client):
    r = admin_client.get('/api/hospitals')
    assert r.status_code == 200
    assert r.data['loaded'] is True and r.data['error'] is None
    assert [h['id'] for h in r.data['hospitals']] == ['h1', 'h2']


def test_supervisor_sees_own_hospital_only(supervisor_client):
    hospitals = supervisor_client.get('/api/hospitals').data['hospitals']
    assert [h['id'] for h in hospitals] == ['h1']
    assert hospitals[0]['supervisorPassword'] == 'pw'


def test_staff_tree_is_redacted(client, seeded):
    assert login(client, '789', 'spw').status_code == 200
    hospital = client.get('/api/hospitals').data['hospitals'][0]
    assert 'supervisorPassword' not in hospital
    member = hospital['departments'][0]['staff'][0]
    assert member['name'] == 'علی' and 'password' not in member


def test_fetch_failure_still_answers_with_error(admin_client, store):
    store.failures.add('select')
    r = admin_client.post('/api/hospitals/refresh')
    assert r.status_code == 200
    assert r.data['ok'] is False and 'Failed to load data' in r.data['error']
    assert len(r.data['hospitals']) == 2


def test_admin_adds_hospital(admin_client):
    r = admin_client.post('/api/hospitals/add', {
        'name': 'بیمارستان نو', 'province': 'فارس', 'city': 'شیراز', 'supervisorName': 'نگار',
        'supervisorNationalId': '333', 'supervisorPassword': 'x',
    }, format='json')
    assert r.status_code == 201
    assert r.data['data']['id'].startswith('hosp-')
    assert len(admin_client.get('/api/hospitals').data['hospitals']) == 3


def test_supervisor_cannot_add_hospital_or_touch_others(supervisor_client):
    r = supervisor_client.post('/api/hospitals/add', {
        'name': 'x', 'province': 'x', 'city': 'x', 'supervisorName': 'x',
        'supervisorNationalId': '1', 'supervisorPassword': '1',
    }, format='json')
    assert r.status_code == 403
    r = supervisor_client.post('/api/hospitals/update', {'hospitalId': 'h2', 'city': 'x'}, format='json')
    assert r.status_code == 403


def test_supervisor_updates_own_hospital(supervisor_client):
    r = supervisor_client.post('/api/hospitals/update', {'hospitalId': 'h1', 'city': 'کرج'}, format='json')
    assert r.status_code == 200
    assert supervisor_client.get('/api/hospitals').data['hospitals'][0]['city'] == 'کرج'


def test_manager_adds_staff_to_own_department(manager_client, store):
    r = manager_client.post('/api/staff/add', {
        'hospitalId': 'h1', 'departmentId': 'd1', 'name': 'نیما', 'title': 'بهیار',
        'nationalId': '999', 'password': 'x',
    }, format='json')
    assert r.status_code == 201
    assert any(s['national_id'] == '999' for s in store.tables['staff_members'])


def test_staff_records_own_work_log(client, seeded):
    assert login(client, '789', 'spw').status_code == 200
    r = client.post('/api/work-logs/save', {
        'hospitalId': 'h1', 'departmentId': 'd1', 'staffId': 's1',
        'record': {'month': 'مهر', 'hours': 160},
    }, format='json')
    assert r.status_code == 200
    assert r.data['data']['staffMemberId'] == 's1'


def test_accreditation_material_upload(supervisor_client, store):
    upload = SimpleUploadedFile('policy.pdf', b'%PDF-1.4', content_type='application/pdf')
    r = supervisor_client.post('/api/materials/add', {
        'hospitalId': 'h1', 'materialType': 'accreditation', 'description': 'Policy', 'file': upload,
    }, format='multipart')
    assert r.status_code == 201
    path = r.data['data']['filePath']
    assert path.startswith('h1/accreditation/mat-') and path in store.objects
    tree = supervisor_client.get('/api/hospitals').data['hospitals'][0]
    assert len(tree['accreditationMaterials']) == 2


def test_monthly_material_requires_month(supervisor_client):
    upload = SimpleUploadedFile('a.pdf', b'%PDF', content_type='application/pdf')
    r = supervisor_client.post('/api/materials/add', {
        'hospitalId': 'h1', 'materialType': 'monthly_staff', 'file': upload,
    }, format='multipart')
    assert r.status_code == 400


def test_material_delete_reports_storage_warning(supervisor_client, store):
    store.failures.add('remove')
    r = supervisor_client.post('/api/materials/delete', {'hospitalId': 'h1', 'materialId': 'mat-1'}, format='json')
    assert r.status_code == 200
    assert r.data['warnings'] == ['Failed to delete file from storage.']
    tree = supervisor_client.get('/api/hospitals').data['hospitals'][0]
    assert tree['accreditationMaterials'] == []


def test_patient_chats_with_care_team(client, seeded):
    assert login(client, '111', 'ppw').status_code == 200
    r = client.post('/api/chat/send', {'hospitalId': 'h1', 'departmentId': 'd1', 'patientId': 'p1',
                                       'text': 'سلام'}, format='json')
    assert r.status_code == 201
    assert r.data['data']['sender'] == 'patient'
    assert seeded.tables['patients'][0]['chat_history'][0]['text'] == 'سلام'


def test_staff_cannot_send_chat(client, seeded):
    assert login(client, '789', 'spw').status_code == 200
    r = client.post('/api/chat/send', {'hospitalId': 'h1', 'text': 'hi'}, format='json')
    assert r.status_code == 403


def test_navigation_back_chain(client, seeded):
    r = login(client, '789', 'spw')
    assert r.data['nav']['view'] == 'staff_member_view'
    r = client.post('/api/nav/back')
    assert (r.data['nav']['view'], r.data['nav']['staffId']) == ('department_view', None)
    r = client.post('/api/nav/back')
    assert (r.data['nav']['view'], r.data['nav']['departmentId']) == ('department_list', None)
    r = client.post('/api/nav/back')
    assert (r.data['nav']['screen'], r.data['nav']['hospitalId']) == ('hospital_list', None)


def test_logout_resets_to_welcome(supervisor_client):
    r = supervisor_client.post('/api/auth/logout')
    assert r.data['nav']['screen'] == 'welcome'
    assert supervisor_client.get('/api/auth/me').status_code == 403


def test_upload_authorization(manager_client):
    r = manager_client.post('/api/upload', {'pathname': 'h1/x.exe', 'contentType': 'application/x-msdownload'},
                            format='json')
    assert r.status_code == 400 and 'error' in r.data
    r = manager_client.post('/api/upload', {'pathname': 'h1/a.pdf', 'contentType': 'application/pdf'},
                            format='json')
    assert r.status_code == 200
    assert r.data['token'] == 'upload-token'


def test_delete_blob(manager_client, store):
    assert manager_client.get('/api/delete-blob').status_code == 405
    r = manager_client.post('/api/delete-blob', {}, format='json')
    assert r.status_code == 400 and r.data == {'error': 'URL is required.'}
    url = f"{STORE_URL}/storage/v1/object/public/materials/h1/accreditation/mat-1-guide.pdf"
    r = manager_client.post('/api/delete-blob', {'url': url}, format='json')
    assert r.status_code == 200 and r.data == {'success': True}
    assert 'h1/accreditation/mat-1-guide.pdf' not in store.objects


def test_delete_blob_failure(manager_client, store):
    store.failures.add('remove')
    r = manager_client.post('/api/delete-blob', {'url': 'h1/x.pdf'}, format='json')
    assert r.status_code == 500 and 'error' in r.data


def test_backup_download_and_restore(admin_client):
    r = admin_client.get('/api/backup')
    assert r.status_code == 200
    assert 'my-hospital-backup-' in r['Content-Disposition']
    assert [h['id'] for h in json.loads(r.content)] == ['h1', 'h2']

    r = admin_client.post('/api/backup/restore', {'hospitals': [{'id': 'x', 'name': 'X'}]}, format='json')
    assert r.status_code == 400

    r = admin_client.post('/api/backup/restore', {'hospitals': [{'id': 'x'}], 'confirm': True}, format='json')
    assert r.status_code == 400 and r.data['error']['code'] == 'backup_error'

    r = admin_client.post('/api/backup/restore', {'hospitals': [{'id': 'x', 'name': 'X'}], 'confirm': True},
                          format='json')
    assert r.status_code == 200
    hospitals = admin_client.get('/api/hospitals').data['hospitals']
    assert [h['id'] for h in hospitals] == ['x'] and hospitals[0]['departments'] == []


def test_healthz(client, store):
    assert client.get('/healthz').json() == {'ok': True, 'store': True}
    store.failures.add('ping')
    assert client.get('/healthz').status_code == 502


def test_patient_sees_only_own_record(client, seeded):
    seeded.tables['patients'].append({'id': 'p2', 'department_id': 'd1', 'name': 'زهرا', 'national_id': '112',
                                      'password': 'x', 'chat_history': [{'id': 'msg-1', 'text': 'secret'}]})
    assert login(client, '111', 'ppw').status_code == 200
    department = client.get('/api/hospitals').data['hospitals'][0]['departments'][0]
    assert [p['id'] for p in department['patients']] == ['p1']
    assert 'password' not in department['patients'][0]


def _seed_second_department(store):
    store.tables['departments'].append(
        {'id': 'd2', 'hospital_id': 'h2', 'name': 'جراحی', 'manager_name': 'کاوه',
         'manager_national_id': '457', 'manager_password': 'x', 'staff_count': 5, 'bed_count': 8})
    store.tables['staff_members'].append(
        {'id': 's2', 'department_id': 'd2', 'name': 'بهرام', 'title': 'پرستار',
         'national_id': '790', 'password': 'x'})


@pytest.mark.parametrize('kind,table', [
    ('checklist-templates', 'checklist_templates'),
    ('exam-templates', 'exam_templates'),
])
def test_supervisor_cannot_touch_other_hospital_templates(client, seeded, kind, table):
    seeded.tables[table].append({'id': 'tpl-h2', 'hospital_id': 'h2', 'name': 'Sina only'})
    assert login(client, '123', 'pw').status_code == 200

    r = client.post(f'/api/{kind}/delete', {'hospitalId': 'h1', 'templateId': 'tpl-h2'}, format='json')
    assert r.status_code == 404
    r = client.post(f'/api/{kind}/save', {'hospitalId': 'h1', 'template': {'id': 'tpl-h2', 'name': 'mine'}},
                    format='json')
    assert r.status_code == 404
    r = client.post(f'/api/{kind}/delete', {'hospitalId': 'h2', 'templateId': 'tpl-h2'}, format='json')
    assert r.status_code == 403
    assert seeded.tables[table] == [{'id': 'tpl-h2', 'hospital_id': 'h2', 'name': 'Sina only'}]


def test_supervisor_updates_own_template_by_id(client, seeded):
    seeded.tables['checklist_templates'].append({'id': 'tpl-h1', 'hospital_id': 'h1', 'name': 'old'})
    assert login(client, '123', 'pw').status_code == 200
    r = client.post('/api/checklist-templates/save', {'hospitalId': 'h1', 'template': {'id': 'tpl-h1', 'name': 'new'}},
                    format='json')
    assert r.status_code == 200
    assert [t['name'] for t in seeded.tables['checklist_templates']] == ['new']


@pytest.mark.parametrize('endpoint,table', [
    ('/api/assessments/save', 'assessments'),
    ('/api/work-logs/save', 'work_logs'),
])
def test_record_of_another_staff_member_is_not_overwritten(manager_client, store, endpoint, table):
    _seed_second_department(store)
    store.tables[table].append({'id': 'rec-x', 'staff_member_id': 's2', 'score': 5})
    store.tables[table].append({'id': 'rec-own', 'staff_member_id': 's1', 'score': 5})
    manager_client.post('/api/hospitals/refresh')

    r = manager_client.post(endpoint, {'hospitalId': 'h1', 'departmentId': 'd1', 'staffId': 's1',
                                       'record': {'id': 'rec-x', 'score': 20}}, format='json')
    assert r.status_code == 404
    assert store.tables[table][0] == {'id': 'rec-x', 'staff_member_id': 's2', 'score': 5}

    r = manager_client.post(endpoint, {'hospitalId': 'h1', 'departmentId': 'd1', 'staffId': 's1',
                                       'record': {'id': 'rec-own', 'score': 20}}, format='json')
    assert r.status_code == 200
    assert store.tables[table][1]['score'] == 20 and store.tables[table][1]['staff_member_id'] == 's1'


def test_staff_cannot_save_records_of_colleagues(client, seeded):
    _seed_second_department(seeded)
    assert login(client, '789', 'spw').status_code == 200
    r = client.post('/api/assessments/save', {'hospitalId': 'h2', 'departmentId': 'd2', 'staffId': 's2',
                                              'record': {'score': 20}}, format='json')
    assert r.status_code == 403
    assert seeded.tables['assessments'] == []


def test_material_description_update(supervisor_client, store):
    r = supervisor_client.post('/api/materials/describe',
                               {'hospitalId': 'h1', 'materialId': 'mat-1', 'description': 'Revised'}, format='json')
    assert r.status_code == 200
    assert store.tables['training_materials'][0]['description'] == 'Revised'


def test_material_description_outside_scope_is_refused(client, seeded):
    seeded.tables['training_materials'].append(
        {'id': 'mat-h2', 'hospital_id': 'h2', 'department_id': None, 'material_type': 'accreditation',
         'month': None, 'name': 'h2.pdf', 'type': 'application/pdf', 'description': 'keep',
         'file_path': 'h2/accreditation/mat-h2-h2.pdf'})
    assert login(client, '123', 'pw').status_code == 200
    for hospital_id in ('h1', 'h2'):
        r = client.post('/api/materials/describe',
                        {'hospitalId': hospital_id, 'materialId': 'mat-h2', 'description': 'x'}, format='json')
        assert r.status_code == 403
    assert seeded.tables['training_materials'][-1]['description'] == 'keep'


def test_banner_update_and_scope(client, seeded):
    seeded.tables['news_banners'] += [
        {'id': 'banner-1', 'hospital_id': 'h1', 'title': 'Flu', 'description': '', 'image_path': 'h1/banners/a.png'},
        {'id': 'banner-2', 'hospital_id': 'h2', 'title': 'Sina', 'description': '', 'image_path': 'h2/banners/b.png'},
    ]
    assert login(client, '123', 'pw').status_code == 200

    r = client.post('/api/banners/update',
                    {'hospitalId': 'h1', 'bannerId': 'banner-1', 'title': 'Flu shots', 'description': 'Free'},
                    format='json')
    assert r.status_code == 200
    assert seeded.tables['news_banners'][0]['title'] == 'Flu shots'

    r = client.post('/api/banners/update',
                    {'hospitalId': 'h1', 'bannerId': 'banner-2', 'title': 'x', 'description': 'x'}, format='json')
    assert r.status_code == 403
    r = client.post('/api/banners/update',
                    {'hospitalId': 'h2', 'bannerId': 'banner-2', 'title': 'x', 'description': 'x'}, format='json')
    assert r.status_code == 403
    assert seeded.tables['news_banners'][1]['title'] == 'Sina'


def test_department_delete_stays_inside_hospital(client, seeded):
    _seed_second_department(seeded)
    assert login(client, '123', 'pw').status_code == 200
    r = client.post('/api/departments/delete', {'hospitalId': 'h1', 'departmentId': 'd2'}, format='json')
    assert r.status_code == 404
    r = client.post('/api/departments/delete', {'hospitalId': 'h2', 'departmentId': 'd2'}, format='json')
    assert r.status_code == 403
    assert [d['id'] for d in seeded.tables['departments']] == ['d1', 'd2']


def test_manager_cannot_update_another_department(client, seeded):
    _seed_second_department(seeded)
    assert login(client, '456', 'mpw').status_code == 200
    r = client.post('/api/departments/update', {'hospitalId': 'h2', 'departmentId': 'd2', 'name': 'x'},
                    format='json')
    assert r.status_code == 403
    assert seeded.tables['departments'][1]['name'] == 'جراحی'


def test_login_recovers_after_failed_first_fetch(client, seeded):
    seeded.failures.add('select')
    assert login(client, '123', 'pw').status_code == 400
    seeded.failures.clear()
    r = login(client, '123', 'pw')
    assert r.status_code == 200 and r.data['principal']['role'] == 'supervisor'


def test_staff_do_not_receive_patient_chat(client, seeded):
    seeded.tables['patients'][0]['chat_history'] = [{'id': 'msg-1', 'sender': 'patient', 'text': 'private'}]
    assert login(client, '789', 'spw').status_code == 200
    department = client.get('/api/hospitals').data['hospitals'][0]['departments'][0]
    assert [p['id'] for p in department['patients']] == ['p1']
    assert department['patients'][0]['chatHistory'] == []


def test_restore_rejects_nested_records_without_id(admin_client):
    bad = [{'id': 'x', 'name': 'X', 'newsBanners': [{'title': 'no id'}]}]
    r = admin_client.post('/api/backup/restore', {'hospitals': bad, 'confirm': True}, format='json')
    assert r.status_code == 400 and r.data['error']['code'] == 'backup_error'
    r = admin_client.post('/api/backup/restore', {'hospitals': [{'id': 'x', 'name': 'X', 'departments': [1]}],
                                                  'confirm': True}, format='json')
    assert r.status_code == 400 and r.data['error']['code'] == 'backup_error'
    assert [h['id'] for h in admin_client.get('/api/hospitals').data['hospitals']] == ['h1', 'h2']
