from datetime import timedelta

import pytest
from django.utils import timezone

from ward.models import Patient
from ward.services.patients import apply_update, create_patient

pytestmark = pytest.mark.django_db


@pytest.fixture
def nurse(make_collaborator):
    return make_collaborator('800', role='enfermeiro', name='ENFERMEIRO LUIZ')


def test_pendency_resolution_stamped_once_per_transition(nurse):
    patient = Patient.objects.create(name='Rita', pendencies='Sem dieta')
    t0 = timezone.now()

    assert apply_update(patient, {'pendencies': 'Nenhuma'}, nurse, now=t0) == ['pendencies_resolved_at']
    assert patient.pendencies_resolved_at == t0

    # same value again: not a transition
    assert apply_update(patient, {'pendencies': 'Nenhuma', 'notes': 'ok'}, nurse, now=t0 + timedelta(minutes=5)) == []
    assert patient.pendencies_resolved_at == t0

    # reopening keeps the last stamp; resolving again moves it
    apply_update(patient, {'pendencies': 'Aguardando Raio-X'}, nurse, now=t0 + timedelta(minutes=10))
    assert patient.pendencies_resolved_at == t0
    t1 = t0 + timedelta(minutes=20)
    apply_update(patient, {'pendencies': 'Nenhuma'}, nurse, now=t1)
    assert patient.pendencies_resolved_at == t1


def test_transfer_flags_stamped_on_false_to_true(nurse):
    patient = Patient.objects.create(name='Caio')
    t0 = timezone.now()
    stamps = apply_update(patient, {'is_transfer_requested': True, 'status': 'Transferência Externa'}, nurse, now=t0)
    assert set(stamps) == {'transfer_requested_at', 'external_transfer_requested_at'}

    later = t0 + timedelta(hours=1)
    assert apply_update(patient, {'is_transfer_requested': True}, nurse, now=later) == []
    assert patient.transfer_requested_at == t0

    assert apply_update(patient, {'status': 'Transferência UPA'}, nurse, now=later) == ['upa_transfer_requested_at']
    assert apply_update(patient, {'is_transferred': True}, nurse, now=later) == ['transferred_at']
    assert apply_update(patient, {'is_transferred': True}, nurse, now=later + timedelta(hours=1)) == []
    assert patient.transferred_at == later


def test_every_write_sets_author_and_version(nurse):
    patient = Patient.objects.create(name='Davi', last_modified_by='x', version=3)
    apply_update(patient, {'notes': 'troca de curativo'}, nurse)
    assert patient.last_modified_by == '800 - ENFERMEIRO LUIZ'
    assert patient.version == 4


def test_bookkeeping_fields_in_updates_are_ignored(nurse):
    patient = Patient.objects.create(name='Eva')
    fake = timezone.now() - timedelta(days=30)
    apply_update(patient, {'transferred_at': fake, 'version': 99, 'created_by': 'x'}, nurse)
    assert patient.transferred_at is None
    assert patient.version == 2
    assert patient.created_by == ''


def test_create_internal_patient_clears_destination(nurse):
    patient = create_patient(nurse, {
        'name': 'Fabio', 'status': 'Internado', 'is_transfer_requested': True,
        'transfer_destination_sector': 'CTI', 'pendencies': 'Sem prescrição médica',
    })
    assert patient.is_new is True
    assert patient.is_transfer_requested is False
    assert patient.transfer_requested_at is None
    assert patient.transfer_destination_sector == ''
    assert patient.pendencies_resolved_at is None
    assert patient.created_by == '800 - ENFERMEIRO LUIZ'
