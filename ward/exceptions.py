"""
Error types raised by the ward services and the API exception handler.

Every error leaves the API as ``{"ok": false, "error": {"code", "message"}}``
so the client can show ``message`` verbatim in its alert dialogs.
"""
from __future__ import annotations

import structlog
from rest_framework import status
from rest_framework.exceptions import APIException, ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

logger = structlog.get_logger(__name__)


class WardError(APIException):
    """Base class for domain errors; keyword arguments travel in the error body."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Requisição inválida.'
    default_code = 'ward_error'

    def __init__(self, detail=None, code=None, **extra):
        super().__init__(detail, code)
        self.extra = extra


class AccountNotFound(WardError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'USUÁRIO NÃO ENCONTRADO: Verifique os dados ou procure a coordenação.'
    default_code = 'account_not_found'


class AccountBlocked(WardError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = ('USUÁRIO BLOQUEADO: Limite de tentativas excedido. '
                      'Procure o Enfermeiro ou a Coordenação para resetar sua senha.')
    default_code = 'account_blocked'


class AccountLocked(WardError):
    """Raised on the failed attempt that blocks the account."""
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = ('SENHA BLOQUEADA: Limite de tentativas atingido. '
                      'Procure seu superior para resetar sua senha.')
    default_code = 'account_locked'


class WrongPassword(WardError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = 'SENHA INCORRETA.'
    default_code = 'wrong_password'


class InvalidNewPassword(WardError):
    default_detail = 'Senha inválida.'
    default_code = 'invalid_new_password'


class DuplicateLogin(WardError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Este usuário já está cadastrado.'
    default_code = 'duplicate_login'


class ProtectedRecord(WardError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = 'Não é permitido excluir o desenvolvedor master.'
    default_code = 'protected_record'


class EditConflict(WardError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = ('CONFLITO DE EDIÇÃO: o paciente foi alterado por outro usuário. '
                      'Recarregue os dados e tente novamente.')
    default_code = 'edit_conflict'


class DischargeBlocked(WardError):
    default_detail = 'Existem pendências que impedem a alta.'
    default_code = 'discharge_blocked'


def api_exception_handler(exc, context):
    resp = drf_exception_handler(exc, context)
    request = context.get('request')
    path = getattr(request, 'path', None)
    if resp is None:
        logger.exception('api.unhandled_error', path=path, error=str(exc))
        return Response(
            {'ok': False, 'error': {'code': 'server_error', 'message': 'Erro interno do servidor.'}},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
    # normalize response
    if isinstance(exc, ValidationError):
        code, message = 'validation_error', resp.data
    elif isinstance(resp.data, dict) and 'detail' in resp.data:
        code, message = getattr(exc, 'default_code', 'api_error'), resp.data['detail']
    else:
        code, message = getattr(exc, 'default_code', 'api_error'), resp.data
    error = {'code': code, 'message': message}
    error.update(getattr(exc, 'extra', None) or {})
    logger.info('api.error', path=path, status=resp.status_code, code=code)
    out = Response({'ok': False, 'error': error}, status=resp.status_code)
    for header in ('WWW-Authenticate', 'Retry-After'):
        if header in resp:
            out[header] = resp[header]
    return out
