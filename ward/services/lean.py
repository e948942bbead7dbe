"""Lean monitoring records and the per-stage time summary."""
from __future__ import annotations

import structlog
from django.db import transaction

from ward.models import LeanPatient, new_record_id
from ward.services.audit import log_action

logger = structlog.get_logger(__name__)

CLIENT_FIELDS = {
    'id': 'id',
    'name': 'name',
    'age': 'age',
    'medical_record': 'medicalRecord',
    'specialty': 'specialty',
}
TIME_FIELDS = {
    'reception_time': 'receptionTime',
    'triage_start_time': 'triageStartTime',
    'md_start_time': 'mdStartTime',
    'md_end_time': 'mdEndTime',
    'lab_time': 'labTime',
    'ct_time': 'ctTime',
    'xray_time': 'xrayTime',
    'medication_time': 'medicationTime',
    'reevaluation_time': 'reevaluationTime',
    'discharge_time': 'dischargeTime',
    'hospitalization_time': 'hospitalizationTime',
    'created_at': 'createdAt',
}


def serialize_lean(p: LeanPatient) -> dict:
    data = {key: getattr(p, field) for field, key in CLIENT_FIELDS.items()}
    for field, key in TIME_FIELDS.items():
        value = getattr(p, field)
        data[key] = value.isoformat() if value else None
    return data


def save_lean_patient(actor, data: dict):
    """Create or update by ``id``; returns ``(record, created)``."""
    data = dict(data)
    record_id = data.pop('id', None) or new_record_id()
    with transaction.atomic():
        record, created = LeanPatient.objects.update_or_create(id=record_id, defaults=data)
    log_action(user=actor, action='lean_create' if created else 'lean_update',
               object_type='lean_patient', object_id=record.id)
    return record, created


def delete_lean_patient(actor, record_id: str) -> int:
    deleted, _ = LeanPatient.objects.filter(pk=record_id).delete()
    log_action(user=actor, action='lean_delete', object_type='lean_patient', object_id=record_id,
               detail={'deleted': deleted})
    return deleted


def stage_summary(qs=None) -> dict:
    """Mean minutes from reception to each recorded stage."""
    qs = LeanPatient.objects.all() if qs is None else qs
    totals = {field: [0.0, 0] for field in LeanPatient.STAGE_FIELDS}
    records = 0
    for record in qs.only('reception_time', *LeanPatient.STAGE_FIELDS):
        records += 1
        for field in LeanPatient.STAGE_FIELDS:
            value = getattr(record, field)
            if value is None or value < record.reception_time:
                continue
            totals[field][0] += (value - record.reception_time).total_seconds() / 60
            totals[field][1] += 1
    stages = []
    for field in LeanPatient.STAGE_FIELDS:
        total, count = totals[field]
        stages.append({
            'stage': TIME_FIELDS[field],
            'count': count,
            'avgMinutes': round(total / count, 1) if count else None,
        })
    logger.debug('lean.summary', records=records)
    return {'records': records, 'stages': stages}
