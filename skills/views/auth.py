"""
Login, logout and session introspection.

Credentials are resolved against the credential index built with the
current hospital tree; the resolved principal and its home navigation
state are stored in the session.
"""
from __future__ import annotations

from rest_framework.decorators import api_view, permission_classes, throttle_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.throttling import AnonRateThrottle

from ..authentication import login_principal, logout_principal
from ..serializers.auth import LoginSerializer
from ..services.audit import log_action
from ..services.navigation import go_to_welcome, login_home
from ..services.store import get_store
from ..services.tree import tree_store
from .navigation import load_nav, save_nav

INVALID_CREDENTIALS = 'کد ملی یا رمز عبور نامعتبر است.'


class LoginRateThrottle(AnonRateThrottle):
    scope = 'login'


@api_view(['POST'])
@permission_classes([AllowAny])
@throttle_classes([LoginRateThrottle])
def login_view(request):
    s = LoginSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    national_id = s.validated_data['nationalId']
    password = s.validated_data['password']

    tree_store.ensure_loaded(get_store())
    principal = tree_store.index().resolve(national_id, password)
    if principal is None:
        log_action(action='login', object_type='principal',
                   detail={'result': 'fail', 'ip': request.META.get('REMOTE_ADDR')})
        return Response({'ok': False, 'error': {'code': 'invalid_credentials', 'message': INVALID_CREDENTIALS}},
                        status=400)

    nav = login_home(load_nav(request), principal)
    login_principal(request, principal)
    save_nav(request, nav)
    log_action(principal=principal, action='login', object_type='principal', object_id=principal.pk,
               detail={'result': 'ok', 'ip': request.META.get('REMOTE_ADDR')})
    return Response({'ok': True, 'principal': principal.scope(), 'nav': nav.as_payload()})


@api_view(['POST'])
@permission_classes([AllowAny])
def logout_view(request):
    principal = request.user
    logout_principal(request)
    nav = go_to_welcome()
    save_nav(request, nav)
    if principal is not None:
        log_action(principal=principal, action='logout', object_type='principal', object_id=principal.pk)
    return Response({'ok': True, 'nav': nav.as_payload()})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def me_view(request):
    return Response({'ok': True, 'principal': request.user.scope(), 'nav': load_nav(request).as_payload()})
