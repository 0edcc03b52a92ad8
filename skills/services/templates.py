"""Checklist and exam template handlers (hospital scoped)."""
from __future__ import annotations

from typing import Any

from .mutations import MutationResult, delete_row, save_record
from .normalize import camelize
from .store import Store


def save_checklist_template(store: Store, hospital_id: str, template: dict[str, Any]) -> MutationResult:
    saved = save_record(store, 'checklist_templates', 'chk', {'hospital_id': hospital_id}, template)
    return MutationResult('save', 'checklist_templates', entity=camelize(saved))


def delete_checklist_template(store: Store, template_id: str) -> MutationResult:
    delete_row(store, 'checklist_templates', template_id, 'checklist template')
    return MutationResult('delete', 'checklist_templates', entity={'id': template_id})


def save_exam_template(store: Store, hospital_id: str, template: dict[str, Any]) -> MutationResult:
    saved = save_record(store, 'exam_templates', 'exam', {'hospital_id': hospital_id}, template)
    return MutationResult('save', 'exam_templates', entity=camelize(saved))


def delete_exam_template(store: Store, template_id: str) -> MutationResult:
    delete_row(store, 'exam_templates', template_id, 'exam template')
    return MutationResult('delete', 'exam_templates', entity={'id': template_id})
