"""
Screen/view state machine of the client.

The state is a small record (screen, view and the selected hospital,
department and staff ids) kept in the browser session.  Every transition
is a pure function returning a new state; back navigation is driven by
``BACK_TABLE`` which declares, per view, the parent view, the selections
to clear and an optional screen change.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass, replace
from typing import Optional

from .credentials import ADMIN, MANAGER, PATIENT, STAFF, SUPERVISOR, Principal

# Screens
WELCOME = 'welcome'
HOSPITAL_LIST = 'hospital_list'
MAIN_APP = 'main_app'
SCREENS = (WELCOME, HOSPITAL_LIST, MAIN_APP)

# Views
DEPARTMENT_LIST = 'department_list'
DEPARTMENT_VIEW = 'department_view'
STAFF_MEMBER_VIEW = 'staff_member_view'
CHECKLIST_MANAGER = 'checklist_manager'
EXAM_MANAGER = 'exam_manager'
TRAINING_MANAGER = 'training_manager'
ACCREDITATION_MANAGER = 'accreditation_manager'
NEWS_BANNER_MANAGER = 'news_banner_manager'
PATIENT_EDUCATION_MANAGER = 'patient_education_manager'
PATIENT_PORTAL = 'patient_portal'
HOSPITAL_COMMUNICATION = 'hospital_communication'
ADMIN_COMMUNICATION = 'admin_communication'

VIEWS = (
    DEPARTMENT_LIST, DEPARTMENT_VIEW, STAFF_MEMBER_VIEW, CHECKLIST_MANAGER, EXAM_MANAGER,
    TRAINING_MANAGER, ACCREDITATION_MANAGER, NEWS_BANNER_MANAGER, PATIENT_EDUCATION_MANAGER,
    PATIENT_PORTAL, HOSPITAL_COMMUNICATION, ADMIN_COMMUNICATION,
)

# Views reachable by a plain "open" from a list or department screen.
OPENABLE_VIEWS = (
    DEPARTMENT_LIST, CHECKLIST_MANAGER, EXAM_MANAGER, TRAINING_MANAGER, ACCREDITATION_MANAGER,
    NEWS_BANNER_MANAGER, PATIENT_EDUCATION_MANAGER, HOSPITAL_COMMUNICATION, ADMIN_COMMUNICATION,
)


@dataclass(frozen=True)
class Transition:
    parent: Optional[str]
    clears: tuple[str, ...] = ()
    screen: Optional[str] = None


_TO_DEPARTMENT_LIST = Transition(parent=DEPARTMENT_LIST, clears=('department_id',))

BACK_TABLE: dict[str, Transition] = {
    STAFF_MEMBER_VIEW: Transition(parent=DEPARTMENT_VIEW, clears=('staff_id',)),
    DEPARTMENT_VIEW: _TO_DEPARTMENT_LIST,
    CHECKLIST_MANAGER: _TO_DEPARTMENT_LIST,
    EXAM_MANAGER: _TO_DEPARTMENT_LIST,
    TRAINING_MANAGER: _TO_DEPARTMENT_LIST,
    ACCREDITATION_MANAGER: _TO_DEPARTMENT_LIST,
    NEWS_BANNER_MANAGER: _TO_DEPARTMENT_LIST,
    PATIENT_EDUCATION_MANAGER: _TO_DEPARTMENT_LIST,
    HOSPITAL_COMMUNICATION: _TO_DEPARTMENT_LIST,
    ADMIN_COMMUNICATION: Transition(parent=DEPARTMENT_LIST),
    DEPARTMENT_LIST: Transition(parent=None, clears=('hospital_id',), screen=HOSPITAL_LIST),
}


@dataclass(frozen=True)
class NavState:
    screen: str = WELCOME
    view: str = DEPARTMENT_LIST
    hospital_id: Optional[str] = None
    department_id: Optional[str] = None
    staff_id: Optional[str] = None

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> 'NavState':
        if not data:
            return cls()
        state = cls(**{k: data.get(k) for k in ('screen', 'view', 'hospital_id', 'department_id', 'staff_id')})
        if state.screen not in SCREENS or state.view not in VIEWS:
            return cls()
        return state

    def as_payload(self) -> dict:
        return {
            'screen': self.screen,
            'view': self.view,
            'hospitalId': self.hospital_id,
            'departmentId': self.department_id,
            'staffId': self.staff_id,
        }


def back(state: NavState) -> NavState:
    transition = BACK_TABLE.get(state.view)
    if transition is None:
        return state
    changes: dict = {field: None for field in transition.clears}
    if transition.parent is not None:
        changes['view'] = transition.parent
    if transition.screen is not None:
        changes['screen'] = transition.screen
    return replace(state, **changes)


def go_to_welcome() -> NavState:
    """Welcome screen with every selection cleared (also used on logout)."""
    return NavState()


def select_hospital(state: NavState, hospital_id: str) -> NavState:
    return replace(state, hospital_id=hospital_id, screen=MAIN_APP, view=DEPARTMENT_LIST)


def select_department(state: NavState, department_id: str) -> NavState:
    return replace(state, department_id=department_id, view=DEPARTMENT_VIEW)


def select_staff(state: NavState, staff_id: str) -> NavState:
    return replace(state, staff_id=staff_id, view=STAFF_MEMBER_VIEW)


def open_view(state: NavState, view: str) -> NavState:
    if view not in OPENABLE_VIEWS:
        raise ValueError(f"view '{view}' cannot be opened directly")
    return replace(state, view=view)


def login_home(state: NavState, principal: Principal) -> NavState:
    """Move to the home screen/view of a freshly logged-in principal."""
    if principal.role == ADMIN:
        return replace(state, screen=HOSPITAL_LIST) if state.screen == WELCOME else state
    if principal.role == PATIENT:
        return replace(state, screen=MAIN_APP, view=PATIENT_PORTAL)
    state = select_hospital(state, principal.hospital_id)
    if principal.role == SUPERVISOR:
        return state
    state = select_department(state, principal.department_id)
    if principal.role == MANAGER:
        return state
    if principal.role == STAFF:
        return select_staff(state, principal.staff_id)
    return state
