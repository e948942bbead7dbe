import pytest
from rest_framework.test import APIClient

from ward.models import Collaborator

pytestmark = pytest.mark.django_db


@pytest.fixture
def coordinator(make_collaborator):
    return make_collaborator('1010', role='coordenacao', name='COORDENAÇÃO SETORIAL')


@pytest.fixture
def nurse(make_collaborator):
    return make_collaborator('700', role='enfermeiro')


def test_deleting_master_account_is_forbidden(developer, coordinator, client_for):
    r = client_for(coordinator).delete('/api/collaborators/1')
    assert r.status_code == 403
    assert r.data['error']['code'] == 'protected_record'
    assert Collaborator.objects.filter(id='1').exists()


def test_coordination_hard_deletes_other_accounts(coordinator, make_collaborator, client_for):
    target = make_collaborator('555')
    r = client_for(coordinator).delete(f'/api/collaborators/{target.id}')
    assert r.status_code == 200
    assert not Collaborator.objects.filter(id=target.id).exists()


def test_nurse_cannot_delete_accounts(nurse, make_collaborator, client_for):
    target = make_collaborator('556')
    assert client_for(nurse).delete(f'/api/collaborators/{target.id}').status_code == 403


def test_technician_cannot_list_collaborators(make_collaborator, client_for):
    tech = make_collaborator('456')
    assert client_for(tech).get('/api/collaborators').status_code == 403


def test_created_account_must_change_default_password(coordinator, client_for):
    r = client_for(coordinator).post('/api/collaborators', {
        'name': 'joão pereira', 'login': '777', 'role': 'tecnico',
    }, format='json')
    assert r.status_code == 201
    assert r.data['data']['name'] == 'JOÃO PEREIRA'

    login = APIClient().post('/api/auth/login', {'login': '777', 'role': 'tecnico', 'password': '1234'}, format='json')
    assert login.status_code == 200
    assert login.data['next'] == 'CHANGE_PASSWORD'


def test_duplicate_login_rejected(coordinator, make_collaborator, client_for):
    make_collaborator('778')
    r = client_for(coordinator).post('/api/collaborators', {
        'name': 'Outro', 'login': '778', 'role': 'enfermeiro',
    }, format='json')
    assert r.status_code == 409
    assert r.data['error']['code'] == 'duplicate_login'


def test_non_numeric_login_rejected(coordinator, client_for):
    r = client_for(coordinator).post('/api/collaborators', {
        'name': 'Outro', 'login': 'abc', 'role': 'tecnico',
    }, format='json')
    assert r.status_code == 400


def test_nurse_cannot_create_accounts(nurse, client_for):
    r = client_for(nurse).post('/api/collaborators', {'name': 'X', 'login': '900', 'role': 'tecnico'}, format='json')
    assert r.status_code == 403


def test_soft_delete_hides_account_except_for_developer(coordinator, developer, make_collaborator, client_for):
    target = make_collaborator('779')
    r = client_for(coordinator).post('/api/collaborators', {'id': target.id, 'isDeleted': True}, format='json')
    assert r.status_code == 200
    target.refresh_from_db()
    assert target.is_deleted and target.is_blocked

    visible = [c['login'] for c in client_for(coordinator).get('/api/collaborators').data]
    assert '779' not in visible
    dev_visible = [c['login'] for c in client_for(developer).get('/api/collaborators').data]
    assert '779' in dev_visible


def test_soft_deleting_developer_is_refused(coordinator, developer, client_for):
    r = client_for(coordinator).post('/api/collaborators', {'id': developer.id, 'isDeleted': True}, format='json')
    assert r.status_code == 403
    developer.refresh_from_db()
    assert developer.is_deleted is False


def test_deleted_login_can_only_be_recreated_by_developer(coordinator, developer, make_collaborator, client_for):
    make_collaborator('780', is_deleted=True, is_blocked=True)
    payload = {'name': 'Volta', 'login': '780', 'role': 'tecnico'}
    r = client_for(coordinator).post('/api/collaborators', payload, format='json')
    assert r.status_code == 409
    assert '5669' in r.data['error']['message']
    assert client_for(developer).post('/api/collaborators', payload, format='json').status_code == 201


def test_nurse_resets_only_blocked_accounts(nurse, make_collaborator, client_for):
    active = make_collaborator('781')
    r = client_for(nurse).post(f'/api/collaborators/{active.id}/reset-password', {}, format='json')
    assert r.status_code == 403

    blocked = make_collaborator('782', is_blocked=True, failed_attempts=3)
    r = client_for(nurse).post(f'/api/collaborators/{blocked.id}/reset-password', {}, format='json')
    assert r.status_code == 200
    blocked.refresh_from_db()
    assert blocked.is_blocked is False
    assert blocked.failed_attempts == 0
    assert blocked.check_password('1234')


def test_coordination_resets_any_account(coordinator, make_collaborator, client_for):
    target = make_collaborator('783', password='9999')
    r = client_for(coordinator).post(f'/api/collaborators/{target.id}/reset-password', {}, format='json')
    assert r.status_code == 200
    target.refresh_from_db()
    assert target.check_password('1234')
