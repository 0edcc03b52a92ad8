"""
Session based authentication of portal principals.

Principals are not Django users: a successful login stores the resolved
:class:`~skills.services.credentials.Principal` in the browser session and
this class rebuilds it for every request.  CSRF is enforced the same way
DRF's own ``SessionAuthentication`` does.
"""
from __future__ import annotations

from rest_framework import authentication

from .services.credentials import Principal

SESSION_KEY = 'principal'


class SessionPrincipalAuthentication(authentication.SessionAuthentication):
    """Authenticate from the ``principal`` entry of the session."""

    def authenticate(self, request):
        data = request._request.session.get(SESSION_KEY)
        if not data:
            return None
        try:
            principal = Principal.from_session(data)
        except (TypeError, AttributeError):
            return None
        self.enforce_csrf(request)
        return principal, None


def login_principal(request, principal: Principal) -> None:
    request.session.cycle_key()
    request.session[SESSION_KEY] = principal.to_session()


def logout_principal(request) -> None:
    request.session.flush()
