"""
Authentication views: collaborator login, password change, session
refresh and logout.

Login goes through :mod:`ward.services.accounts` so that the lockout
counter is applied on every attempt.  A collaborator still using the
default password gets no session here; the client must call
``change-password`` first, which issues the session on success.
"""
from __future__ import annotations

import structlog
from rest_framework_simplejwt.tokens import RefreshToken
from rest_framework_simplejwt.views import TokenRefreshView
from rest_framework_simplejwt.token_blacklist.models import BlacklistedToken, OutstandingToken
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework.authtoken.models import Token
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from ward.navigation import UNITS, AppView, build_menu
from ward.serializers.auth import ChangePasswordSerializer, LoginSerializer
from ward.services import accounts
from ward.services.audit import log_action
from ward.services.notifications import badge_counts, should_remind

logger = structlog.get_logger(__name__)


def serialize_user(user) -> dict:
    return {
        'id': user.id,
        'login': user.login,
        'name': user.name,
        'role': user.role,
        'isDeveloper': user.is_developer,
    }


def _session_payload(user, next_view=AppView.UNIT_SELECTION) -> dict:
    token_obj, _ = Token.objects.get_or_create(user=user)
    refresh = RefreshToken.for_user(user)
    badges = badge_counts(user.role)
    return {
        'ok': True,
        'next': str(next_view),
        'token': token_obj.key,
        'jwt_access': str(refresh.access_token),
        'jwt_refresh': str(refresh),
        'role': user.role,
        'user': serialize_user(user),
        'units': UNITS,
        'menu': build_menu(user.role, badges),
        'showPendencyReminder': should_remind(user.role, on_login=True, count=badges['pendencies']),
    }


@api_view(['POST'])
@permission_classes([AllowAny])
def login_view(request):
    s = LoginSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    vd = s.validated_data

    result = accounts.authenticate(vd['login'], vd['role'], vd['password'])
    user = result.collaborator
    if result.must_change_password:
        logger.info('auth.login.change_password_required', login=user.login)
        return Response({
            'ok': True,
            'next': str(AppView.CHANGE_PASSWORD),
            'mustChangePassword': True,
            'user': serialize_user(user),
        })

    logger.info('auth.login.ok', login=user.login, role=user.role)
    return Response(_session_payload(user, result.next_view))

# ScopedRateThrottle reads throttle_scope from the wrapped APIView class
login_view.cls.throttle_scope = 'login'


@api_view(['POST'])
@permission_classes([AllowAny])
def change_password_view(request):
    s = ChangePasswordSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    vd = s.validated_data
    user = accounts.change_password(vd['login'], vd['role'], vd['password'], vd['newPassword'])
    payload = _session_payload(user)
    payload['message'] = 'Senha pessoal definida com sucesso!'
    return Response(payload)

change_password_view.cls.throttle_scope = 'login'


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def session_view(request):
    user = request.user
    badges = badge_counts(user.role)
    return Response({
        'ok': True,
        'user': serialize_user(user),
        'role': user.role,
        'units': UNITS,
        'menu': build_menu(user.role, badges),
        'badges': badges,
    })


# ---------------------------------------------------------------------
# JWT: refresh & logout
# ---------------------------------------------------------------------
@api_view(['POST'])
@permission_classes([AllowAny])
def jwt_refresh_view(request):
    """Return a new access token from refresh token."""
    view = TokenRefreshView.as_view()
    resp = view(request._request)
    if isinstance(resp, Response):
        data = dict(resp.data)
        if 'access' in data and 'jwt_access' not in data:
            data['jwt_access'] = data.pop('access')
        return Response(data, status=resp.status_code)
    return resp


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def jwt_logout_view(request):
    """End the session: drop the DRF token and blacklist refresh tokens."""
    refresh = request.data.get('refresh')
    count = 0
    if refresh:
        try:
            RefreshToken(refresh).blacklist()
            count = 1
        except TokenError as exc:
            logger.info('auth.logout.invalid_refresh', error=str(exc))
    else:
        for token in OutstandingToken.objects.filter(user=request.user):
            _, created = BlacklistedToken.objects.get_or_create(token=token)
            count += int(created)
    Token.objects.filter(user=request.user).delete()
    log_action(user=request.user, action='logout', object_type='collaborator', object_id=request.user.id,
               detail={'blacklisted': count})
    return Response({'ok': True, 'blacklisted': count})
