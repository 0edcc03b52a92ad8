"""
Chat between patients and their care team, and hospital/admin messaging.

A message goes to a patient's ``chat_history`` when a patient is named,
otherwise to the hospital's ``admin_messages``.  Both are JSON columns
rewritten with the full history plus the new message.
"""
from __future__ import annotations

import logging
from typing import Optional

import bleach
from django.utils import timezone

from ..exceptions import MutationError, StoreError
from .mutations import MutationResult, check_upload, new_id, remove_quietly
from .store import Store
from .tree import find_department, find_hospital, find_patient

logger = logging.getLogger(__name__)

SENDERS = ('patient', 'manager', 'hospital', 'admin')


def send_message(store: Store, hospitals: list[dict], *, hospital_id: str, sender: str,
                 text: Optional[str] = None, file: Optional[dict] = None,
                 department_id: Optional[str] = None, patient_id: Optional[str] = None) -> MutationResult:
    """Append a message to a patient chat or to the hospital's admin thread.

    ``file`` is ``{'name', 'type', 'content'}`` when an attachment is sent.
    """
    if sender not in SENDERS:
        raise MutationError(f"Unknown sender '{sender}'.")
    text = bleach.clean((text or '').strip(), strip=True)
    if not text and not file:
        raise MutationError('Message cannot be empty.')

    hospital = find_hospital(hospitals, hospital_id)
    if hospital is None:
        raise MutationError('Hospital not found.')
    patient = None
    if patient_id:
        patient = find_patient(find_department(hospital, department_id), patient_id)
        if patient is None:
            raise MutationError('Patient not found.')

    message: dict = {'id': new_id('msg'), 'sender': sender, 'timestamp': timezone.now().isoformat()}
    if text:
        message['text'] = text

    uploaded = None
    if file:
        check_upload(file['type'], len(file['content']))
        uploaded = f"{hospital_id}/chat_attachments/{new_id('chat-file')}-{file['name']}"
        try:
            store.upload(uploaded, file['content'], file['type'])
        except StoreError as exc:
            raise MutationError('Error uploading attachment.') from exc
        message['file'] = {'path': uploaded, 'name': file['name'], 'type': file['type']}

    try:
        if patient is not None:
            history = list(patient.get('chatHistory') or []) + [message]
            store.update('patients', {'chat_history': history}, match={'id': patient_id})
        else:
            history = list(hospital.get('adminMessages') or []) + [message]
            store.update('hospitals', {'admin_messages': history}, match={'id': hospital_id})
    except StoreError as exc:
        if uploaded:
            remove_quietly(store, uploaded)
        raise MutationError('Failed to send message.') from exc

    table = 'patients' if patient is not None else 'hospitals'
    logger.debug("message %s stored on %s", message['id'], table)
    return MutationResult('send', table, entity=message)
