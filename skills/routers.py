"""
URL mappings of the portal API.

Paths are flat verb paths (``api/<resource>/<action>``) without trailing
slashes; every mutation is a POST.
"""
from django.urls import path, include

from .views import health
from .views.auth import login_view, logout_view, me_view
from .views.backup import download_backup, restore_backup
from .views.blob import delete_blob_view, upload
from .views.chat import send_chat_message
from .views.hospitals import (
    add_department,
    add_hospital,
    delete_department,
    delete_hospital,
    reset_hospital,
    update_department,
    update_hospital,
)
from .views.materials import (
    add_banner,
    add_material,
    delete_banner,
    delete_material,
    update_banner,
    update_material_description,
)
from .views.navigation import (
    nav_back,
    nav_open,
    nav_select_department,
    nav_select_hospital,
    nav_select_staff,
    nav_state,
    nav_welcome,
)
from .views.staff import (
    add_patient,
    add_staff,
    delete_patient,
    delete_staff,
    save_assessment,
    save_work_log,
    update_staff,
)
from .views.templates import (
    delete_checklist_template,
    delete_exam_template,
    save_checklist_template,
    save_exam_template,
)
from .views.tree import get_hospitals, refresh_hospitals


urlpatterns = [
    path('metrics', include('django_prometheus.urls')),
    path('healthz', health.healthz),
    # Authentication
    path('api/auth/login', login_view),
    path('api/auth/logout', logout_view),
    path('api/auth/me', me_view),
    # Navigation
    path('api/nav', nav_state),
    path('api/nav/back', nav_back),
    path('api/nav/welcome', nav_welcome),
    path('api/nav/select-hospital', nav_select_hospital),
    path('api/nav/select-department', nav_select_department),
    path('api/nav/select-staff', nav_select_staff),
    path('api/nav/open', nav_open),
    # Tree
    path('api/hospitals', get_hospitals),
    path('api/hospitals/refresh', refresh_hospitals),
    # Hospitals
    path('api/hospitals/add', add_hospital),
    path('api/hospitals/update', update_hospital),
    path('api/hospitals/delete', delete_hospital),
    path('api/hospitals/reset', reset_hospital),
    # Departments
    path('api/departments/add', add_department),
    path('api/departments/update', update_department),
    path('api/departments/delete', delete_department),
    # Staff and patients
    path('api/staff/add', add_staff),
    path('api/staff/update', update_staff),
    path('api/staff/delete', delete_staff),
    path('api/patients/add', add_patient),
    path('api/patients/delete', delete_patient),
    path('api/assessments/save', save_assessment),
    path('api/work-logs/save', save_work_log),
    # Templates
    path('api/checklist-templates/save', save_checklist_template),
    path('api/checklist-templates/delete', delete_checklist_template),
    path('api/exam-templates/save', save_exam_template),
    path('api/exam-templates/delete', delete_exam_template),
    # Materials and banners
    path('api/materials/add', add_material),
    path('api/materials/delete', delete_material),
    path('api/materials/describe', update_material_description),
    path('api/banners/add', add_banner),
    path('api/banners/update', update_banner),
    path('api/banners/delete', delete_banner),
    # Chat
    path('api/chat/send', send_chat_message),
    # Blob storage
    path('api/upload', upload),
    path('api/delete-blob', delete_blob_view),
    # Local backup
    path('api/backup', download_backup),
    path('api/backup/restore', restore_backup),
]
