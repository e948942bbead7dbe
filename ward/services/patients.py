"""
Patient records: creation defaults, update bookkeeping, bulk operations.

Every write goes through :func:`apply_update`, which compares the
incoming values with the stored record and stamps the transition
timestamps the reports rely on:

* ``pendencies`` becoming ``Nenhuma``          -> ``pendencies_resolved_at``
* ``is_transfer_requested`` false -> true      -> ``transfer_requested_at``
* ``status`` becoming ``Transferência UPA``    -> ``upa_transfer_requested_at``
* ``status`` becoming ``Transferência Externa``-> ``external_transfer_requested_at``
* ``is_transferred`` false -> true             -> ``transferred_at``

A stamp is written once per transition; re-sending the same value does
not move it.  ``last_modified_by`` and ``version`` change on every write.
"""
from __future__ import annotations

from typing import Iterable, Optional

from django.db import transaction
from django.db.models import Q
from django.utils import timezone
from rest_framework.exceptions import NotFound, ValidationError

from ward.exceptions import DischargeBlocked, EditConflict
from ward.models import Collaborator, Patient, new_record_id
from ward.services.audit import log_action
from ward.services.notifications import OPEN_PENDENCY, notify_patients_changed

# model field -> camelCase key used by the client
CLIENT_FIELDS = {
    'id': 'id',
    'name': 'name',
    'social_name': 'socialName',
    'sex': 'sex',
    'age': 'age',
    'medical_record': 'medicalRecord',
    'corridor': 'corridor',
    'specialty': 'specialty',
    'status': 'status',
    'has_aih': 'hasAih',
    'pendencies': 'pendencies',
    'diagnosis': 'diagnosis',
    'mobility': 'mobility',
    'has_allergy': 'hasAllergy',
    'allergy_details': 'allergyDetails',
    'venous_access': 'venousAccess',
    'venous_access_date': 'venousAccessDate',
    'has_prescription': 'hasPrescription',
    'diet': 'diet',
    'disabilities': 'disabilities',
    'notes': 'notes',
    'has_bracelet': 'hasBracelet',
    'has_bed_identification': 'hasBedIdentification',
    'situation': 'situation',
    'has_lesion': 'hasLesion',
    'lesion_description': 'lesionDescription',
    'is_transfer_requested': 'isTransferRequested',
    'transfer_destination_sector': 'transferDestinationSector',
    'transfer_destination_bed': 'transferDestinationBed',
    'is_transferred': 'isTransferred',
    'vitals': 'vitals',
    'is_new': 'isNew',
    'created_by': 'createdBy',
    'last_modified_by': 'lastModifiedBy',
    'version': 'version',
}
TIMESTAMP_FIELDS = {
    'created_at': 'createdAt',
    'pendencies_resolved_at': 'pendenciesResolvedAt',
    'transfer_requested_at': 'transferRequestedAt',
    'upa_transfer_requested_at': 'upaTransferRequestedAt',
    'external_transfer_requested_at': 'externalTransferRequestedAt',
    'transferred_at': 'transferredAt',
    'updated_at': 'updatedAt',
}
# written by the server only
READ_ONLY_FIELDS = set(TIMESTAMP_FIELDS) | {'id', 'created_by', 'last_modified_by', 'version'}

SCOPES = ('all', 'active', 'pendencies', 'transfers', 'finalized', 'new')


def _iso(value):
    return value.isoformat() if value else None


def serialize_patient(p: Patient) -> dict:
    data = {key: getattr(p, field) for field, key in CLIENT_FIELDS.items()}
    for field, key in TIMESTAMP_FIELDS.items():
        data[key] = _iso(getattr(p, field))
    data['hasOpenPendency'] = p.has_open_pendency
    return data


def list_patients(scope: str = 'all', q: str = ''):
    qs = Patient.objects.all()
    if scope == 'active':
        qs = qs.filter(is_transferred=False)
    elif scope == 'pendencies':
        qs = qs.filter(is_transferred=False).filter(OPEN_PENDENCY)
    elif scope == 'transfers':
        qs = qs.filter(is_transferred=False, is_transfer_requested=True)
    elif scope == 'finalized':
        qs = qs.filter(is_transferred=True)
    elif scope == 'new':
        qs = qs.filter(is_transferred=False, is_new=True)
    if q:
        qs = qs.filter(Q(name__icontains=q) | Q(medical_record__icontains=q))
    return qs.order_by('name')


def _clean(updates: dict) -> dict:
    return {k: v for k, v in updates.items() if k not in READ_ONLY_FIELDS}


def apply_update(patient: Patient, updates: dict, actor: Collaborator, *, now=None) -> list:
    """Apply ``updates`` in memory and stamp transitions; returns the stamped fields.

    The caller saves the record.
    """
    now = now or timezone.now()
    updates = _clean(updates)
    stamps = []

    new_pendency = updates.get('pendencies', patient.pendencies)
    if patient.pendencies != Patient.PENDENCY_NONE and new_pendency == Patient.PENDENCY_NONE:
        stamps.append('pendencies_resolved_at')
    if not patient.is_transfer_requested and updates.get('is_transfer_requested') is True:
        stamps.append('transfer_requested_at')
    new_status = updates.get('status', patient.status)
    if new_status != patient.status:
        if new_status == Patient.STATUS_TRANSFER_UPA:
            stamps.append('upa_transfer_requested_at')
        elif new_status == Patient.STATUS_TRANSFER_EXTERNAL:
            stamps.append('external_transfer_requested_at')
    if not patient.is_transferred and updates.get('is_transferred') is True:
        stamps.append('transferred_at')

    for field, value in updates.items():
        setattr(patient, field, value)
    for field in stamps:
        setattr(patient, field, now)
    patient.last_modified_by = actor.display_label
    patient.version = (patient.version or 0) + 1
    return stamps


def create_patient(actor: Collaborator, data: dict, patient_id: Optional[str] = None) -> Patient:
    """Insert a new record with the admission defaults.

    A patient admitted directly with a transfer status is treated as a
    transfer request: the flag is set, the request time is stamped and
    the destination is pre-filled (``UPA`` or ``AGUARDANDO`` for the bed).
    """
    now = timezone.now()
    data = _clean(data)
    patient = Patient(id=patient_id or new_record_id(), **data)
    label = actor.display_label
    patient.created_at = now
    patient.created_by = label
    patient.last_modified_by = label
    patient.is_new = True
    patient.is_transferred = False
    patient.version = 1

    is_upa = patient.status == Patient.STATUS_TRANSFER_UPA
    is_external = patient.status == Patient.STATUS_TRANSFER_EXTERNAL
    auto_transfer = is_upa or is_external
    patient.is_transfer_requested = auto_transfer
    patient.transfer_requested_at = now if auto_transfer else None
    patient.upa_transfer_requested_at = now if is_upa else None
    patient.external_transfer_requested_at = now if is_external else None
    if auto_transfer:
        patient.transfer_destination_sector = patient.status
        patient.transfer_destination_bed = 'UPA' if is_upa else 'AGUARDANDO'
    else:
        patient.transfer_destination_sector = ''
        patient.transfer_destination_bed = ''
    patient.pendencies_resolved_at = now if patient.pendencies == Patient.PENDENCY_NONE else None
    patient.save(force_insert=True)

    log_action(user=actor, action='patient_create', object_type='patient', object_id=patient.id,
               detail={'status': patient.status})
    return patient


def _check_version(patient: Patient, expected_version: Optional[int]):
    if expected_version is not None and expected_version != patient.version:
        raise EditConflict(currentVersion=patient.version, expectedVersion=expected_version)


def _audit_conflict(actor: Collaborator, patient_id: str, exc: EditConflict):
    # written after the rollback so the event survives it
    log_action(user=actor, action='patient_conflict', object_type='patient', object_id=patient_id,
               detail={'expected': exc.extra.get('expectedVersion'), 'current': exc.extra.get('currentVersion')})


def _update_locked(actor: Collaborator, patient: Patient, updates: dict, expected_version: Optional[int]) -> Patient:
    _check_version(patient, expected_version)
    stamps = apply_update(patient, updates, actor)
    patient.save()
    log_action(user=actor, action='patient_update', object_type='patient', object_id=patient.id,
               detail={'fields': sorted(_clean(updates)), 'stamps': stamps})
    return patient


def save_patient(actor: Collaborator, data: dict, *, expected_version: Optional[int] = None):
    """Create or update by ``id``; returns ``(patient, created)``."""
    data = dict(data)
    patient_id = data.pop('id', None)
    try:
        with transaction.atomic():
            patient = None
            if patient_id:
                patient = Patient.objects.select_for_update().filter(pk=patient_id).first()
            if patient is None:
                patient = create_patient(actor, data, patient_id=patient_id)
                created = True
            else:
                _update_locked(actor, patient, data, expected_version)
                created = False
            transaction.on_commit(lambda: notify_patients_changed([patient.id]))
    except EditConflict as exc:
        _audit_conflict(actor, patient_id, exc)
        raise
    return patient, created


def update_patient(actor: Collaborator, patient_id: str, updates: dict, *, expected_version: Optional[int] = None) -> Patient:
    try:
        with transaction.atomic():
            patient = Patient.objects.select_for_update().filter(pk=patient_id).first()
            if patient is None:
                raise NotFound('Paciente não encontrado.')
            _update_locked(actor, patient, updates, expected_version)
            transaction.on_commit(lambda: notify_patients_changed([patient.id]))
    except EditConflict as exc:
        _audit_conflict(actor, patient_id, exc)
        raise
    return patient


def bulk_update(actor: Collaborator, ids: Iterable[str], updates: dict) -> list:
    """Apply the same changes to every listed patient in one transaction."""
    ids = list(dict.fromkeys(ids))
    updated = []
    with transaction.atomic():
        for patient in Patient.objects.select_for_update().filter(pk__in=ids):
            apply_update(patient, updates, actor)
            patient.save()
            updated.append(patient)
        if updated:
            log_action(user=actor, action='patient_bulk_update', object_type='patient',
                       detail={'ids': [p.id for p in updated], 'fields': sorted(_clean(updates))})
            transaction.on_commit(lambda: notify_patients_changed([p.id for p in updated]))
    return updated


def bulk_discharge(actor: Collaborator, ids: Iterable[str]) -> list:
    """Archive the patients as discharged unless one still waits for social work."""
    ids = list(dict.fromkeys(ids))
    blocker = (
        Patient.objects.filter(pk__in=ids, pendencies=Patient.PENDENCY_SOCIAL_WORKER)
        .order_by('name')
        .first()
    )
    if blocker is not None:
        raise DischargeBlocked(
            f'O paciente {blocker.name} possui pendência de {Patient.PENDENCY_SOCIAL_WORKER}. '
            'É necessário concluir esta pendência antes de finalizar a alta física.',
            patientId=blocker.id,
        )
    return bulk_update(actor, ids, {'status': Patient.STATUS_ALTA, 'is_transferred': True})


def finish_transfer(actor: Collaborator, patient_id: str, destination: str = '') -> Patient:
    """Mark a requested transfer as done; external transfers need the destination."""
    with transaction.atomic():
        patient = Patient.objects.select_for_update().filter(pk=patient_id).first()
        if patient is None:
            raise NotFound('Paciente não encontrado.')
        updates = {'is_transferred': True}
        if patient.status == Patient.STATUS_TRANSFER_EXTERNAL:
            destination = (destination or '').strip()
            if not destination:
                raise ValidationError({'destination': ['Por favor, informe o destino da transferência.']})
            updates['transfer_destination_bed'] = destination.upper()
        apply_update(patient, updates, actor)
        patient.save()
        log_action(user=actor, action='patient_transfer_finish', object_type='patient', object_id=patient.id,
                   detail={'status': patient.status, 'destination': patient.transfer_destination_bed})
        transaction.on_commit(lambda: notify_patients_changed([patient.id]))
    return patient


def mark_seen(actor: Collaborator) -> int:
    """Clear the "new" flag on every active patient; returns how many changed."""
    ids = list(Patient.objects.filter(is_transferred=False, is_new=True).values_list('id', flat=True))
    if not ids:
        return 0
    return len(bulk_update(actor, ids, {'is_new': False}))


def delete_patients(actor: Collaborator, ids: Iterable[str]) -> int:
    """Remove exactly the listed records; unknown ids are ignored."""
    ids = list(dict.fromkeys(ids))
    with transaction.atomic():
        deleted, _ = Patient.objects.filter(pk__in=ids).delete()
        log_action(user=actor, action='patient_delete', object_type='patient',
                   detail={'ids': ids, 'deleted': deleted})
        if deleted:
            transaction.on_commit(lambda: notify_patients_changed(ids))
    return deleted
