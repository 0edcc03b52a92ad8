"""
Owner of the normalized hospital tree.

The tree (and the credential index built from it) lives in Django's cache
so that every request of a process, or every process when Redis backs the
cache, reads the same copy.  :class:`TreeStore` is its only writer:
resyncs replace it wholesale, merges apply a local patch, and backup
restores swap in a user supplied tree.  Readers always get deep copies.
"""
from __future__ import annotations

import copy
import logging
from dataclasses import dataclass, field
from typing import Callable, Iterator, Optional

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.conf import settings
from django.core.cache import cache
from django.utils import timezone

from ..exceptions import StoreError
from .credentials import CredentialIndex
from .normalize import HOSPITAL_TREE_SELECT, TREE_FILTERS, normalize_hospitals
from .store import Store, get_store

logger = logging.getLogger(__name__)

UPDATES_GROUP = 'updates'


@dataclass
class FetchResult:
    ok: bool
    hospitals: list[dict] = field(default_factory=list)
    error: Optional[str] = None


def broadcast_refresh(version: int, source: str) -> None:
    channel_layer = get_channel_layer()
    if channel_layer is None:
        return
    event = {"type": "broadcast.refresh", "version": version, "ts": timezone.now().isoformat(), "source": source}
    async_to_sync(channel_layer.group_send)(UPDATES_GROUP, event)


class TreeStore:
    CACHE_KEY = 'tree:state'

    def __init__(self, backend=None):
        self._cache = backend or cache

    def _state(self) -> Optional[dict]:
        return self._cache.get(self.CACHE_KEY)

    def _write(self, hospitals: list[dict], *, source: str, error: Optional[str] = None,
               fetched: bool = True) -> dict:
        version = int(timezone.now().timestamp() * 1000)
        state = {
            'hospitals': hospitals,
            'index': CredentialIndex.build(hospitals),
            'loaded': True,
            'fetched': fetched,
            'error': error,
            'source': source,
            'version': version,
            'updatedAt': timezone.now().isoformat(),
        }
        self._cache.set(self.CACHE_KEY, state, settings.TREE_CACHE_TIMEOUT)
        return state

    @property
    def loaded(self) -> bool:
        return self._state() is not None

    def ensure_loaded(self, store: Optional[Store] = None) -> None:
        """Fetch the tree unless a copy is cached; a tree never fetched successfully is fetched again."""
        state = self._state()
        if state is None or not state.get('fetched', True):
            self.resync(store)

    def hospitals(self) -> list[dict]:
        state = self._state()
        return copy.deepcopy(state['hospitals']) if state else []

    def snapshot(self) -> dict:
        state = self._state()
        if state is None:
            return {'loaded': False, 'error': None, 'source': None, 'version': None, 'updatedAt': None, 'hospitals': []}
        return {k: copy.deepcopy(v) for k, v in state.items() if k != 'index'}

    def index(self) -> CredentialIndex:
        state = self._state()
        return state['index'] if state else CredentialIndex()

    def resync(self, store: Optional[Store] = None) -> FetchResult:
        """Fetch the whole tree and replace the cached copy.

        A failed fetch keeps the previous tree (or an empty one), records
        the error and still marks loading complete.
        """
        store = store or get_store()
        try:
            rows = store.select('hospitals', HOSPITAL_TREE_SELECT, TREE_FILTERS)
            hospitals = normalize_hospitals(rows)
        except (StoreError, TypeError, AttributeError) as exc:
            message = f"Failed to load data from the database: {exc}"
            logger.error(message)
            previous = self._state()
            kept = previous['hospitals'] if previous else []
            if previous is None:
                self._write(kept, source='store', error=message, fetched=False)
            else:
                previous['error'] = message
                self._cache.set(self.CACHE_KEY, previous, settings.TREE_CACHE_TIMEOUT)
            return FetchResult(ok=False, hospitals=copy.deepcopy(kept), error=message)

        state = self._write(hospitals, source='store')
        logger.info("tree resynced: %d hospitals", len(hospitals))
        broadcast_refresh(state['version'], 'store')
        return FetchResult(ok=True, hospitals=copy.deepcopy(hospitals))

    def patch(self, apply: Callable[[list[dict]], None], store: Optional[Store] = None) -> None:
        """Apply a local change to the tree without refetching it."""
        self.ensure_loaded(store)
        fetched = self._state()['fetched']
        hospitals = self.hospitals()
        apply(hospitals)
        state = self._write(hospitals, source='merge', fetched=fetched)
        broadcast_refresh(state['version'], 'merge')

    def replace(self, hospitals: list[dict], *, source: str) -> None:
        state = self._write(copy.deepcopy(hospitals), source=source)
        broadcast_refresh(state['version'], source)

    def clear(self) -> None:
        self._cache.delete(self.CACHE_KEY)


tree_store = TreeStore()


# ---------------------------------------------------------------------
# Lookups over a tree
# ---------------------------------------------------------------------
def find_hospital(hospitals: list[dict], hospital_id: Optional[str]) -> Optional[dict]:
    return next((h for h in hospitals if h['id'] == hospital_id), None)


def find_department(hospital: Optional[dict], department_id: Optional[str]) -> Optional[dict]:
    if hospital is None:
        return None
    return next((d for d in hospital['departments'] if d['id'] == department_id), None)


def find_staff(department: Optional[dict], staff_id: Optional[str]) -> Optional[dict]:
    if department is None:
        return None
    return next((s for s in department['staff'] if s['id'] == staff_id), None)


def find_patient(department: Optional[dict], patient_id: Optional[str]) -> Optional[dict]:
    if department is None:
        return None
    return next((p for p in department.get('patients') or [] if p['id'] == patient_id), None)


def locate_department(hospitals: list[dict], department_id: str) -> tuple[Optional[dict], Optional[dict]]:
    for h in hospitals:
        d = find_department(h, department_id)
        if d is not None:
            return h, d
    return None, None


def locate_staff(hospitals: list[dict], staff_id: str) -> tuple[Optional[dict], Optional[dict], Optional[dict]]:
    for h in hospitals:
        for d in h['departments']:
            s = find_staff(d, staff_id)
            if s is not None:
                return h, d, s
    return None, None, None


def locate_patient(hospitals: list[dict], patient_id: str) -> tuple[Optional[dict], Optional[dict], Optional[dict]]:
    for h in hospitals:
        for d in h['departments']:
            p = find_patient(d, patient_id)
            if p is not None:
                return h, d, p
    return None, None, None


def iter_materials(hospitals: list[dict]) -> Iterator[tuple[dict, Optional[dict], dict]]:
    """Yield ``(hospital, department, material)`` over every material bucket."""
    for h in hospitals:
        for m in h.get('accreditationMaterials') or []:
            yield h, None, m
        for monthly in h.get('trainingMaterials') or []:
            for m in monthly.get('materials') or []:
                yield h, None, m
        for d in h.get('departments') or []:
            for m in d.get('patientEducationMaterials') or []:
                yield h, d, m


def locate_material(hospitals: list[dict], material_id: str) -> tuple[Optional[dict], Optional[dict], Optional[dict]]:
    return next(((h, d, m) for h, d, m in iter_materials(hospitals) if m.get('id') == material_id),
                (None, None, None))
