"""
Collaborator accounts: login with lockout, password changes and the
management rules applied by coordination.

Login is by ``(login, role)``.  A collaborator's failed attempt counter
is persisted on every wrong password; when it reaches
``HOSPFLOW_MAX_LOGIN_ATTEMPTS`` the account is blocked and only a
password reset (nurse or coordination) brings it back.  Accounts still
using the shared default password must pick a personal one before they
receive a session.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import structlog
from django.conf import settings
from django.db import transaction
from django.db.models import F, Q
from rest_framework.exceptions import NotFound, PermissionDenied

from ward.exceptions import (
    AccountBlocked,
    AccountLocked,
    AccountNotFound,
    DuplicateLogin,
    InvalidNewPassword,
    ProtectedRecord,
    WrongPassword,
)
from ward.models import Collaborator
from ward.navigation import AppView
from ward.permissions import is_coordination
from ward.services.audit import log_action

logger = structlog.get_logger(__name__)

MAX_PASSWORD_DIGITS = 6


@dataclass
class LoginResult:
    collaborator: Collaborator
    next_view: str

    @property
    def must_change_password(self) -> bool:
        return self.next_view == AppView.CHANGE_PASSWORD


def find_account(login: str, role: Optional[str] = None) -> Optional[Collaborator]:
    """Return the active account for ``login``; the developer login ignores ``role``."""
    qs = Collaborator.objects.active().filter(login=str(login).strip())
    if str(login).strip() != settings.HOSPFLOW_DEV_LOGIN and role:
        qs = qs.filter(role=role)
    return qs.order_by('created_at').first()


def _get_account_or_raise(login, role) -> Collaborator:
    user = find_account(login, role)
    if user is None:
        log_action(user=None, action='login', object_type='collaborator',
                   detail={'result': 'not_found', 'login': login, 'role': role})
        raise AccountNotFound()
    return user


def _register_failure(user: Collaborator):
    limit = settings.HOSPFLOW_MAX_LOGIN_ATTEMPTS
    # increment in SQL; the in-memory copy may predate other failed attempts
    with transaction.atomic():
        accounts = Collaborator.objects.filter(pk=user.pk)
        accounts.update(failed_attempts=F('failed_attempts') + 1)
        accounts.filter(failed_attempts__gte=limit).update(is_blocked=True)
    user.refresh_from_db(fields=['failed_attempts', 'is_blocked'])
    blocked = user.is_blocked
    log_action(user=user, action='login', object_type='collaborator', object_id=user.id,
               detail={'result': 'blocked' if blocked else 'wrong_password', 'attempts': user.failed_attempts})
    if blocked:
        raise AccountLocked(
            f'SENHA BLOQUEADA: Você errou a senha {limit} vezes. '
            'Procure seu superior para resetar sua senha.',
            attempts=user.failed_attempts,
            maxAttempts=limit,
        )
    raise WrongPassword(
        f'SENHA INCORRETA: Tentativa {user.failed_attempts} de {limit}. '
        f'Após {limit} erros o usuário será bloqueado.',
        attempts=user.failed_attempts,
        maxAttempts=limit,
    )


def authenticate(login: str, role: Optional[str], password: str) -> LoginResult:
    """Check credentials and apply the lockout bookkeeping.

    The counter update is committed before the error is raised, so it
    must not run inside an enclosing atomic block that the error unwinds.
    """
    user = _get_account_or_raise(login, role)
    if user.is_blocked:
        log_action(user=user, action='login', object_type='collaborator', object_id=user.id,
                   detail={'result': 'refused_blocked'})
        raise AccountBlocked()

    if not user.check_password(password):
        _register_failure(user)

    # a parallel request may have blocked the account after it was loaded
    if not Collaborator.objects.filter(pk=user.pk, is_blocked=False).update(failed_attempts=0):
        log_action(user=user, action='login', object_type='collaborator', object_id=user.id,
                   detail={'result': 'refused_blocked'})
        raise AccountBlocked()
    user.failed_attempts = 0

    if password == settings.HOSPFLOW_DEFAULT_PASSWORD:
        next_view = AppView.CHANGE_PASSWORD
    else:
        next_view = AppView.UNIT_SELECTION
    log_action(user=user, action='login', object_type='collaborator', object_id=user.id,
               detail={'result': 'ok', 'next': str(next_view)})
    return LoginResult(collaborator=user, next_view=next_view)


def validate_new_password(new_password: str) -> str:
    value = (new_password or '').strip()
    if not value.isdigit():
        raise InvalidNewPassword('A senha deve conter apenas números.')
    if len(value) > MAX_PASSWORD_DIGITS:
        raise InvalidNewPassword(f'A nova senha deve ter no máximo {MAX_PASSWORD_DIGITS} dígitos.')
    if value == settings.HOSPFLOW_DEFAULT_PASSWORD:
        raise InvalidNewPassword('Você não pode usar a senha padrão como sua nova senha.')
    return value


def change_password(login: str, role: Optional[str], password: str, new_password: str) -> Collaborator:
    """Replace the current password after re-checking it; returns the account."""
    value = validate_new_password(new_password)
    result = authenticate(login, role, password)
    user = result.collaborator
    user.set_password(value)
    user.failed_attempts = 0
    user.is_blocked = False
    user.save(update_fields=['password', 'failed_attempts', 'is_blocked'])
    log_action(user=user, action='password_change', object_type='collaborator', object_id=user.id)
    return user


def can_reset_password(actor: Collaborator, target: Collaborator) -> bool:
    if is_coordination(actor):
        return True
    return actor.role == Collaborator.ROLE_ENFERMEIRO and target.is_blocked


def reset_password(actor: Collaborator, target: Collaborator) -> Collaborator:
    """Set the default password back and unblock the account."""
    if target.is_deleted:
        raise NotFound('Colaborador não encontrado.')
    if not can_reset_password(actor, target):
        raise PermissionDenied('Sem permissão para resetar a senha deste colaborador.')
    target.set_password(settings.HOSPFLOW_DEFAULT_PASSWORD)
    target.failed_attempts = 0
    target.is_blocked = False
    target.save(update_fields=['password', 'failed_attempts', 'is_blocked'])
    log_action(user=actor, action='password_reset', object_type='collaborator', object_id=target.id)
    return target


def list_collaborators(actor: Collaborator, q: str = ''):
    qs = Collaborator.objects.all()
    if not actor.is_developer:
        qs = qs.filter(is_deleted=False)
    if q:
        qs = qs.filter(Q(name__icontains=q) | Q(login__icontains=q))
    return qs.order_by('name')


@transaction.atomic
def create_collaborator(actor: Collaborator, *, name: str, login: str, role: str) -> Collaborator:
    login = str(login).strip()
    if Collaborator.objects.filter(login=login, is_deleted=False).exists():
        raise DuplicateLogin()
    if Collaborator.objects.filter(login=login, is_deleted=True).exists() and not actor.is_developer:
        raise DuplicateLogin(
            'Este usuário foi excluído. Apenas o desenvolvedor master '
            f'({settings.HOSPFLOW_DEV_LOGIN}) pode cadastrar novamente.'
        )
    user = Collaborator.objects.create_user(login, name=name.strip(), role=role)
    log_action(user=actor, action='collaborator_create', object_type='collaborator', object_id=user.id,
               detail={'login': login, 'role': role})
    return user


@transaction.atomic
def update_collaborator(actor: Collaborator, target: Collaborator, changes: dict) -> Collaborator:
    """Apply name/role/flag edits; ``is_deleted`` is the soft delete used by the client."""
    if changes.get('is_deleted') and not target.is_deleted:
        if target.is_developer:
            raise ProtectedRecord('Não é permitido excluir o desenvolvedor master.')
        target.is_deleted = True
        target.is_blocked = True
    elif changes.get('is_deleted') is False and target.is_deleted:
        if not actor.is_developer:
            raise PermissionDenied(
                f'Apenas o desenvolvedor master ({settings.HOSPFLOW_DEV_LOGIN}) pode reativar este usuário.'
            )
        target.is_deleted = False
        target.is_blocked = False
        target.failed_attempts = 0
    if 'is_blocked' in changes and not target.is_deleted:
        target.is_blocked = changes['is_blocked']
        if not target.is_blocked:
            target.failed_attempts = 0
    for field in ('name', 'role'):
        if field in changes:
            setattr(target, field, changes[field])
    target.save()
    log_action(user=actor, action='collaborator_update', object_type='collaborator', object_id=target.id,
               detail={k: v for k, v in changes.items() if k != 'password'})
    return target


def delete_collaborator(actor: Collaborator, target: Collaborator) -> None:
    if target.id == Collaborator.MASTER_ID:
        raise ProtectedRecord('Não é permitido excluir o desenvolvedor master.')
    target_id = target.id
    target.delete()
    log_action(user=actor, action='collaborator_delete', object_type='collaborator', object_id=target_id)
    logger.info('collaborator.deleted', collaborator_id=target_id)
