import pytest
from django.core.cache import cache
from rest_framework.test import APIClient

from ward.models import Collaborator


@pytest.fixture(autouse=True)
def _fast_hasher_and_clean_cache(settings):
    # throttling counters live in the locmem cache
    settings.PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def make_collaborator(db):
    def _make(login, role=Collaborator.ROLE_TECNICO, password='2468', name=None, **extra):
        return Collaborator.objects.create_user(
            login, password=password, name=name or f'COLABORADOR {login}', role=role, **extra
        )
    return _make


@pytest.fixture
def developer(db, settings):
    return Collaborator.objects.create_user(
        settings.HOSPFLOW_DEV_LOGIN,
        password=settings.HOSPFLOW_DEV_PASSWORD,
        id=Collaborator.MASTER_ID,
        name='MA DESENVOLVEDOR',
        role=Collaborator.ROLE_COORDENACAO,
    )


@pytest.fixture
def client_for():
    def _client(user):
        client = APIClient()
        client.force_authenticate(user=user)
        return client
    return _client
