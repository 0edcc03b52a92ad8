"""
Shared plumbing of the create/update/delete handlers.

A handler performs its remote writes and returns a :class:`MutationResult`
describing the changed entity.  :func:`commit` then brings the tree up to
date either by a full resync or, when the handler supplied one, by
applying its local patch.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from django.conf import settings
from django.utils import timezone

from ..exceptions import MutationError, StoreError
from .normalize import to_row
from .store import Store
from .tree import FetchResult, TreeStore, tree_store

logger = logging.getLogger(__name__)

RESYNC = 'resync'
MERGE = 'merge'
STRATEGIES = (RESYNC, MERGE)


def new_id(prefix: str) -> str:
    return f"{prefix}-{int(timezone.now().timestamp() * 1000)}"


@dataclass
class MutationResult:
    action: str
    table: str
    entity: Optional[dict] = None
    warnings: list[str] = field(default_factory=list)
    patch: Optional[Callable[[list[dict]], None]] = None
    strategy: str = RESYNC
    fetch: Optional[FetchResult] = None

    def as_payload(self) -> dict:
        payload: dict[str, Any] = {'ok': True, 'action': self.action, 'data': self.entity}
        if self.warnings:
            payload['warnings'] = self.warnings
        if self.fetch is not None and not self.fetch.ok:
            payload['resyncError'] = self.fetch.error
        return payload


def commit(result: MutationResult, strategy: Optional[str] = None, *,
           store: Optional[Store] = None, tree: Optional[TreeStore] = None) -> MutationResult:
    """Bring the tree up to date after a successful remote write."""
    tree = tree or tree_store
    strategy = strategy or result.strategy
    if strategy == MERGE and result.patch is not None:
        tree.patch(result.patch, store)
    else:
        result.fetch = tree.resync(store)
    return result


def save_record(store: Store, table: str, prefix: str, owner: dict[str, Any], record: dict[str, Any]) -> dict:
    """Insert or update a free-form record owned by another entity."""
    values = dict(record)
    record_id = values.pop('id', None) or new_id(prefix)
    row = {'id': record_id, **to_row(values), **owner}
    try:
        return store.upsert(table, row)
    except StoreError as exc:
        raise MutationError(f"Failed to save {table.replace('_', ' ')}: {exc}") from exc


def delete_row(store: Store, table: str, row_id: str, label: str) -> None:
    try:
        store.delete(table, match={'id': row_id})
    except StoreError as exc:
        raise MutationError(f"Failed to delete {label}: {exc}") from exc


def check_upload(content_type: str, size: int) -> None:
    if content_type not in settings.ALLOWED_UPLOAD_TYPES:
        raise MutationError(f"File type '{content_type}' is not allowed.")
    if size > settings.UPLOAD_MAX_MB * 1024 * 1024:
        raise MutationError(f"File is larger than {settings.UPLOAD_MAX_MB} MB.")


def remove_quietly(store: Store, path: str) -> bool:
    """Best-effort removal of an object; a failure is logged, never retried."""
    try:
        store.remove([path])
    except StoreError as exc:
        logger.warning("cleanup of %s failed: %s", path, exc)
        return False
    return True


def upload_then_write(store: Store, path: str, content: bytes, content_type: str,
                      write: Callable[[], Any], *, upload_error: str, write_error: str) -> Any:
    """Upload an object, then run the metadata write.

    When the write fails the uploaded object is removed again.
    """
    try:
        store.upload(path, content, content_type)
    except StoreError as exc:
        raise MutationError(upload_error) from exc
    try:
        return write()
    except StoreError as exc:
        remove_quietly(store, path)
        raise MutationError(write_error) from exc
