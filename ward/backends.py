"""
Authentication backend used by ``django.contrib.auth.authenticate``.

Collaborators are identified by (login, role) rather than by a unique
username, so the stock ``ModelBackend`` lookup is replaced.  The API
login goes through :func:`ward.services.accounts.authenticate`, which
adds the lockout bookkeeping; this backend serves the Django admin and
any other caller of ``authenticate()``.
"""
from __future__ import annotations

from django.contrib.auth import get_user_model
from django.contrib.auth.backends import ModelBackend

from .services.accounts import find_account

UserModel = get_user_model()


class CollaboratorBackend(ModelBackend):
    def authenticate(self, request, username=None, password=None, login=None, role=None, **kwargs):
        login = login or username
        if not login or password is None:
            return None
        user = find_account(login, role)
        if user is None:
            # Run the hasher once to reduce the timing difference between
            # an unknown login and a wrong password.
            UserModel().set_password(password)
            return None
        if user.check_password(password) and self.user_can_authenticate(user):
            return user
        return None
