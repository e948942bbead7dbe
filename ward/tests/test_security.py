import os
import subprocess
import sys

import pytest
from django.urls import reverse
from rest_framework.test import APIClient

from ward.exceptions import AccountBlocked, AccountLocked, WrongPassword
from ward.models import AuditEvent, Collaborator
from ward.services import accounts

pytestmark = pytest.mark.django_db


def login(client, login, role, password):
    return client.post(reverse('login_view'), {'login': login, 'role': role, 'password': password}, format='json')


def test_three_wrong_passwords_block_account(make_collaborator):
    client = APIClient()
    u = make_collaborator('100', role='tecnico', password='2468')

    for attempt in (1, 2):
        r = login(client, '100', 'tecnico', '0000')
        assert r.status_code == 401
        assert r.data['error']['code'] == 'wrong_password'
        assert r.data['error']['attempts'] == attempt
        assert f'Tentativa {attempt} de 3' in r.data['error']['message']

    r = login(client, '100', 'tecnico', '0000')
    assert r.status_code == 403
    assert r.data['error']['code'] == 'account_locked'
    u.refresh_from_db()
    assert u.is_blocked is True
    assert u.failed_attempts == 3

    # the right password no longer helps
    r = login(client, '100', 'tecnico', '2468')
    assert r.status_code == 403
    assert r.data['error']['code'] == 'account_blocked'


def test_successful_login_resets_counter(make_collaborator):
    client = APIClient()
    u = make_collaborator('101', password='2468')
    login(client, '101', 'tecnico', '0000')
    r = login(client, '101', 'tecnico', '2468')
    assert r.status_code == 200
    u.refresh_from_db()
    assert u.failed_attempts == 0


def test_wrong_passwords_on_stale_copies_still_block(make_collaborator, monkeypatch):
    make_collaborator('102', password='2468')
    # every request loaded the account before any of them saved
    copies = [Collaborator.objects.get(login='102') for _ in range(4)]
    monkeypatch.setattr(accounts, 'find_account', lambda login, role=None: copies.pop(0))

    for _ in range(2):
        with pytest.raises(WrongPassword):
            accounts.authenticate('102', 'tecnico', '0000')
    with pytest.raises(AccountLocked):
        accounts.authenticate('102', 'tecnico', '0000')

    u = Collaborator.objects.get(login='102')
    assert u.failed_attempts == 3
    assert u.is_blocked is True

    # the last copy still looks unblocked, the right password must not get in
    with pytest.raises(AccountBlocked):
        accounts.authenticate('102', 'tecnico', '2468')
    u.refresh_from_db()
    assert u.is_blocked is True


def test_lock_message_follows_configured_limit(make_collaborator, settings):
    settings.HOSPFLOW_MAX_LOGIN_ATTEMPTS = 2
    make_collaborator('103', password='2468')
    with pytest.raises(WrongPassword):
        accounts.authenticate('103', 'tecnico', '0000')
    with pytest.raises(AccountLocked) as exc:
        accounts.authenticate('103', 'tecnico', '0000')
    assert 'errou a senha 2 vezes' in str(exc.value.detail)
    assert exc.value.extra == {'attempts': 2, 'maxAttempts': 2}


def test_services_import_before_drf_views(settings):
    code = (
        'import django; django.setup(); '
        'import ward.services.patients, ward.services.accounts, ward.authentication'
    )
    env = {**os.environ, 'DJANGO_SETTINGS_MODULE': 'hospflow.settings'}
    proc = subprocess.run([sys.executable, '-c', code], cwd=settings.BASE_DIR, env=env,
                          capture_output=True, text=True)
    assert proc.returncode == 0, proc.stderr


def test_default_password_routes_to_change_password(make_collaborator):
    client = APIClient()
    make_collaborator('200', role='enfermeiro', password='1234')
    r = login(client, '200', 'enfermeiro', '1234')
    assert r.status_code == 200
    assert r.data['next'] == 'CHANGE_PASSWORD'
    assert r.data['mustChangePassword'] is True
    assert 'token' not in r.data
    assert 'jwt_access' not in r.data


def test_personal_password_routes_to_unit_selection(make_collaborator):
    client = APIClient()
    make_collaborator('201', role='enfermeiro', password='9090')
    r = login(client, '201', 'enfermeiro', '9090')
    assert r.status_code == 200
    assert r.data['next'] == 'UNIT_SELECTION'
    assert r.data['token']
    assert r.data['jwt_access'] and r.data['jwt_refresh']
    assert [item['view'] for item in r.data['menu']][0] == 'CLINICAL_DECISION'


@pytest.mark.parametrize('new_password,fragment', [
    ('12ab', 'apenas números'),
    ('1234567', 'no máximo 6'),
    ('1234', 'senha padrão'),
])
def test_change_password_rules(make_collaborator, new_password, fragment):
    client = APIClient()
    u = make_collaborator('210', password='1234')
    r = client.post(reverse('change_password_view'), {
        'login': '210', 'role': 'tecnico', 'password': '1234', 'newPassword': new_password,
    }, format='json')
    assert r.status_code == 400
    assert r.data['error']['code'] == 'invalid_new_password'
    assert fragment in r.data['error']['message']
    u.refresh_from_db()
    assert u.check_password('1234')
    assert u.failed_attempts == 0


def test_change_password_issues_session(make_collaborator):
    client = APIClient()
    u = make_collaborator('211', password='1234')
    r = client.post(reverse('change_password_view'), {
        'login': '211', 'role': 'tecnico', 'password': '1234', 'newPassword': '135790',
    }, format='json')
    assert r.status_code == 200
    assert r.data['token']
    u.refresh_from_db()
    assert u.check_password('135790')
    assert login(client, '211', 'tecnico', '135790').data['next'] == 'UNIT_SELECTION'


def test_change_password_with_wrong_current_password_counts_as_failure(make_collaborator):
    client = APIClient()
    u = make_collaborator('212', password='1234')
    r = client.post(reverse('change_password_view'), {
        'login': '212', 'role': 'tecnico', 'password': '9999', 'newPassword': '5555',
    }, format='json')
    assert r.status_code == 401
    u.refresh_from_db()
    assert u.failed_attempts == 1


def test_role_must_match_account(make_collaborator):
    client = APIClient()
    make_collaborator('300', role='tecnico')
    r = login(client, '300', 'enfermeiro', '2468')
    assert r.status_code == 404
    assert r.data['error']['code'] == 'account_not_found'
    assert AuditEvent.objects.filter(action='login', detail__result='not_found').exists()


def test_deleted_account_cannot_login(make_collaborator):
    client = APIClient()
    make_collaborator('301', is_deleted=True)
    assert login(client, '301', 'tecnico', '2468').status_code == 404


def test_developer_login_ignores_selected_role(developer, settings):
    client = APIClient()
    r = login(client, settings.HOSPFLOW_DEV_LOGIN, 'tecnico', settings.HOSPFLOW_DEV_PASSWORD)
    assert r.status_code == 200
    assert r.data['user']['isDeveloper'] is True
    assert r.data['role'] == Collaborator.ROLE_COORDENACAO


def test_token_rejected_once_account_is_blocked(make_collaborator):
    client = APIClient()
    u = make_collaborator('400', password='2468')
    token = login(client, '400', 'tecnico', '2468').data['token']
    client.credentials(HTTP_AUTHORIZATION=f'Token {token}')
    assert client.get(reverse('session_view')).status_code == 200

    u.is_blocked = True
    u.save(update_fields=['is_blocked'])
    r = client.get(reverse('session_view'))
    assert r.status_code == 401
    assert r.data['error']['code'] == 'authentication_failed'


def test_logout_ends_token_session(make_collaborator):
    client = APIClient()
    make_collaborator('401', password='2468')
    token = login(client, '401', 'tecnico', '2468').data['token']
    client.credentials(HTTP_AUTHORIZATION=f'Token {token}')
    r = client.post(reverse('jwt_logout_view'), {}, format='json')
    assert r.status_code == 200
    assert r.data['blacklisted'] >= 1
    assert client.get(reverse('session_view')).status_code == 401


def test_api_requires_authentication():
    client = APIClient()
    r = client.get('/api/patients')
    assert r.status_code == 401
    assert r.data['ok'] is False


def test_error_envelope_for_validation_errors():
    client = APIClient()
    r = client.post(reverse('login_view'), {'login': '', 'role': 'x'}, format='json')
    assert r.status_code == 400
    assert r.data['error']['code'] == 'validation_error'
    assert 'password' in r.data['error']['message']
