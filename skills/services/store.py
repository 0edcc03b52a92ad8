"""
Gateway to the hosted store (Supabase).

One client is created per process on first use and shared by every
request.  All table and bucket access goes through :class:`Store` so that
client failures surface as :class:`~skills.exceptions.StoreError` and a
missing configuration as :class:`~skills.exceptions.ConfigurationError`.
"""
from __future__ import annotations

import logging
from typing import Any, Optional

from django.conf import settings
from supabase import create_client

from ..exceptions import ConfigurationError, StoreError

logger = logging.getLogger(__name__)

_store: Optional['Store'] = None


def is_configured() -> bool:
    return bool(settings.SUPABASE_URL and settings.SUPABASE_ANON_KEY)


class Store:
    """Thin wrapper over the table and storage APIs of one client."""

    def __init__(self, client: Any, bucket: str):
        self.client = client
        self.bucket = bucket

    def _execute(self, what: str, query):
        try:
            return query.execute()
        except Exception as exc:
            logger.error("store %s failed: %s", what, exc)
            raise StoreError(f"{what} failed: {exc}") from exc

    @staticmethod
    def _match(query, match: dict[str, Any]):
        for column, value in match.items():
            query = query.eq(column, value)
        return query

    # ------------------------------------------------------------------
    # Tables
    # ------------------------------------------------------------------
    def select(self, table: str, columns: str = '*', filters: Optional[dict[str, Any]] = None) -> list[dict]:
        query = self._match(self.client.table(table).select(columns), filters or {})
        resp = self._execute(f"select {table}", query)
        return list(resp.data or [])

    def insert(self, table: str, row: dict[str, Any]) -> dict:
        resp = self._execute(f"insert {table}", self.client.table(table).insert(row))
        data = resp.data or []
        return data[0] if data else dict(row)

    def upsert(self, table: str, row: dict[str, Any]) -> dict:
        resp = self._execute(f"upsert {table}", self.client.table(table).upsert(row))
        data = resp.data or []
        return data[0] if data else dict(row)

    def update(self, table: str, values: dict[str, Any], *, match: dict[str, Any]) -> list[dict]:
        query = self._match(self.client.table(table).update(values), match)
        resp = self._execute(f"update {table}", query)
        return list(resp.data or [])

    def delete(self, table: str, *, match: dict[str, Any]) -> list[dict]:
        query = self._match(self.client.table(table).delete(), match)
        resp = self._execute(f"delete {table}", query)
        return list(resp.data or [])

    def ping(self) -> bool:
        self._execute("ping", self.client.table('hospitals').select('id').limit(1))
        return True

    # ------------------------------------------------------------------
    # Object storage
    # ------------------------------------------------------------------
    def _objects(self):
        return self.client.storage.from_(self.bucket)

    def upload(self, path: str, content: bytes, content_type: str) -> str:
        try:
            self._objects().upload(path, content, {'content-type': content_type})
        except Exception as exc:
            logger.error("upload of %s failed: %s", path, exc)
            raise StoreError(f"upload failed: {exc}") from exc
        return path

    def remove(self, paths: list[str]) -> None:
        try:
            self._objects().remove(paths)
        except Exception as exc:
            logger.error("removal of %s failed: %s", paths, exc)
            raise StoreError(f"remove failed: {exc}") from exc

    def public_url(self, path: str) -> str:
        return self._objects().get_public_url(path)

    def signed_upload(self, path: str) -> dict:
        try:
            data = self._objects().create_signed_upload_url(path)
        except Exception as exc:
            logger.error("signed upload for %s failed: %s", path, exc)
            raise StoreError(f"upload authorization failed: {exc}") from exc
        return {
            'path': data.get('path', path),
            'token': data.get('token'),
            'signedUrl': data.get('signed_url') or data.get('signedUrl'),
        }

    def object_path(self, url: str) -> str:
        """Return the bucket key for a public object URL (or a bare key)."""
        marker = f"/storage/v1/object/public/{self.bucket}/"
        if marker in url:
            return url.split(marker, 1)[1].split('?', 1)[0]
        return url


def get_store() -> Store:
    """Return the process-wide store, creating the client on first use."""
    global _store
    if _store is None:
        if not is_configured():
            raise ConfigurationError('SUPABASE_URL and SUPABASE_ANON_KEY must be set.')
        client = create_client(settings.SUPABASE_URL, settings.SUPABASE_ANON_KEY)
        _store = Store(client, settings.SUPABASE_BUCKET)
        logger.info("store client created for %s", settings.SUPABASE_URL)
    return _store


def set_store(store: Optional[Store]) -> None:
    """Replace the process-wide store (``None`` forces a new client)."""
    global _store
    _store = store
