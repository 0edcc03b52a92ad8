"""
Training material, news banner and blob handlers.

Files live in the store's bucket, their metadata in ``training_materials``
and ``news_banners``.  Creating uploads the file first and removes it again
if the metadata insert fails.  Deleting removes the file first and then
the row; a failed file removal is reported as a warning and does not stop
the row deletion.
"""
from __future__ import annotations

import logging
from typing import Optional

from django.conf import settings

from ..exceptions import MutationError, StoreError
from .mutations import MutationResult, check_upload, new_id, upload_then_write
from .normalize import ACCREDITATION, MATERIAL_TYPES, MONTHLY_STAFF, PATIENT_EDUCATION, banner_from_row, material_from_row
from .store import Store
from .tree import find_hospital, locate_material

logger = logging.getLogger(__name__)

PERSIAN_MONTHS = (
    "فروردین", "اردیبهشت", "خرداد",
    "تیر", "مرداد", "شهریور",
    "مهر", "آبان", "آذر",
    "دی", "بهمن", "اسفند",
)


def add_material(store: Store, *, hospital_id: str, material_type: str, filename: str, content: bytes,
                 content_type: str, description: str = '', month: Optional[str] = None,
                 department_id: Optional[str] = None) -> MutationResult:
    if material_type not in MATERIAL_TYPES:
        raise MutationError(f"Unknown material type '{material_type}'.")
    if material_type == MONTHLY_STAFF and not month:
        raise MutationError('Monthly training materials need a month.')
    if material_type == PATIENT_EDUCATION and not department_id:
        raise MutationError('Patient education materials need a department.')
    check_upload(content_type, len(content))

    material_id = new_id('mat')
    file_path = f"{hospital_id}/{material_type}/{material_id}-{filename}"
    row = {
        'id': material_id,
        'hospital_id': hospital_id,
        'department_id': department_id,
        'material_type': material_type,
        'month': month if material_type == MONTHLY_STAFF else None,
        'name': filename,
        'type': content_type,
        'description': description,
        'file_path': file_path,
    }
    inserted = upload_then_write(
        store, file_path, content, content_type,
        lambda: store.insert('training_materials', row),
        upload_error='Error uploading file.',
        write_error='Error saving file metadata.',
    )
    return MutationResult('add', 'training_materials', entity=material_from_row(inserted))


def delete_material(store: Store, hospitals: list[dict], material_id: str) -> MutationResult:
    """Delete a material of any bucket: stored file first, then its row."""
    _, _, material = locate_material(hospitals, material_id)
    if material is None or not material.get('filePath'):
        raise MutationError('Material not found or has no file path.')

    result = MutationResult('delete', 'training_materials', entity={'id': material_id})
    try:
        store.remove([material['filePath']])
    except StoreError:
        result.warnings.append('Failed to delete file from storage.')
    try:
        store.delete('training_materials', match={'id': material_id})
    except StoreError as exc:
        raise MutationError('Failed to delete file metadata from database.') from exc
    return result


def update_material_description(store: Store, material_id: str, description: str) -> MutationResult:
    try:
        rows = store.update('training_materials', {'description': description}, match={'id': material_id})
    except StoreError as exc:
        raise MutationError('Failed to update description') from exc
    entity = material_from_row(rows[0]) if rows else {'id': material_id, 'description': description}
    return MutationResult('update', 'training_materials', entity=entity)


def add_banner(store: Store, hospital_id: str, *, title: str, description: str, filename: str,
               content: bytes, content_type: str) -> MutationResult:
    if not content_type.startswith('image/'):
        raise MutationError('Banner image must be an image.')
    check_upload(content_type, len(content))

    banner_id = new_id('banner')
    image_path = f"{hospital_id}/banners/{banner_id}-{filename}"
    row = {
        'id': banner_id,
        'hospital_id': hospital_id,
        'title': title,
        'description': description,
        'image_path': image_path,
    }
    inserted = upload_then_write(
        store, image_path, content, content_type,
        lambda: store.insert('news_banners', row),
        upload_error='Error uploading banner image.',
        write_error='Error saving banner metadata.',
    )
    return MutationResult('add', 'news_banners', entity=banner_from_row(inserted))


def update_banner(store: Store, banner_id: str, *, title: str, description: str) -> MutationResult:
    try:
        rows = store.update('news_banners', {'title': title, 'description': description}, match={'id': banner_id})
    except StoreError as exc:
        raise MutationError('Failed to update banner.') from exc
    entity = banner_from_row(rows[0]) if rows else {'id': banner_id, 'title': title, 'description': description}
    return MutationResult('update', 'news_banners', entity=entity)


def delete_banner(store: Store, hospitals: list[dict], hospital_id: str, banner_id: str) -> MutationResult:
    hospital = find_hospital(hospitals, hospital_id)
    banner = next((b for b in (hospital or {}).get('newsBanners') or [] if b['id'] == banner_id), None)
    if banner is None:
        raise MutationError('Banner not found.')

    result = MutationResult('delete', 'news_banners', entity={'id': banner_id})
    if banner.get('imagePath'):
        try:
            store.remove([banner['imagePath']])
        except StoreError:
            result.warnings.append('Failed to delete banner image from storage.')
    try:
        store.delete('news_banners', match={'id': banner_id})
    except StoreError as exc:
        raise MutationError('Failed to delete banner.') from exc
    return result


def banner_urls(store: Store, banners: list[dict]) -> dict[str, str]:
    """Public image URL per banner id, skipping banners whose URL fails."""
    urls: dict[str, str] = {}
    for banner in banners:
        path = banner.get('imagePath')
        if not path:
            continue
        if path.startswith(('http://', 'https://')):
            urls[banner['id']] = path
            continue
        try:
            urls[banner['id']] = store.public_url(path)
        except Exception as exc:
            logger.warning("image url for banner %s unavailable: %s", banner['id'], exc)
    return urls


# ---------------------------------------------------------------------
# Direct blob endpoints
# ---------------------------------------------------------------------
def authorize_upload(store: Store, pathname: str, content_type: str) -> dict:
    """Validate a client upload request and hand out a signed upload token."""
    if content_type not in settings.ALLOWED_UPLOAD_TYPES:
        raise MutationError(f"Content type '{content_type}' is not allowed.")
    if not pathname or pathname.startswith('/') or '..' in pathname.split('/'):
        raise MutationError('Invalid pathname.')
    return store.signed_upload(pathname)


def delete_blob(store: Store, url: str) -> None:
    store.remove([store.object_path(url)])


__all__ = [
    'ACCREDITATION', 'MONTHLY_STAFF', 'PATIENT_EDUCATION', 'PERSIAN_MONTHS',
    'add_material', 'delete_material', 'update_material_description',
    'add_banner', 'update_banner', 'delete_banner', 'banner_urls',
    'authorize_upload', 'delete_blob',
]
