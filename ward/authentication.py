"""
Token authentication for collaborator sessions.

DRF's stock ``TokenAuthentication`` rejects inactive users with a generic
English message.  Collaborators are inactive for two different reasons
(blocked after failed logins, or removed by coordination) and the ward
client shows the reason to the user, so this subclass reports each case
separately.
"""
from __future__ import annotations

from rest_framework import authentication, exceptions


class TokenAuthentication(authentication.TokenAuthentication):
    """Token auth using the ``Token`` keyword with ward-specific rejections."""

    keyword = 'Token'

    def authenticate_credentials(self, key):
        model = self.get_model()
        try:
            token = model.objects.select_related('user').get(key=key)
        except model.DoesNotExist:
            raise exceptions.AuthenticationFailed('Sessão inválida ou encerrada. Faça login novamente.')

        # ward.exceptions imports rest_framework.views, which loads this module
        from .exceptions import AccountBlocked

        user = token.user
        if user.is_deleted:
            raise exceptions.AuthenticationFailed('Usuário excluído do sistema.')
        if user.is_blocked:
            raise exceptions.AuthenticationFailed(AccountBlocked.default_detail)
        return (user, token)
