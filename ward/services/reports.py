from __future__ import annotations

from collections import Counter
from datetime import date

from django.db.models import Q

from ward.models import Patient
from ward.services.notifications import OPEN_PENDENCY, active_patients


def _by_specialty(qs) -> list[dict]:
    counts = Counter(s or 'Não informado' for s in qs.values_list('specialty', flat=True))
    return [
        {'name': name, 'value': value}
        for name, value in sorted(counts.items(), key=lambda kv: (-kv[1], kv[0]))
        if value > 0
    ]


def ward_summary() -> dict:
    """Counters for the dashboard over the patients still on the ward."""
    qs = active_patients()
    return {
        'total': qs.count(),
        'internados': qs.filter(status=Patient.STATUS_INTERNADO).count(),
        'observacao': qs.filter(status=Patient.STATUS_OBSERVACAO).count(),
        'reavaliacao': qs.filter(status=Patient.STATUS_REAVALIACAO).count(),
        'pendencias': qs.filter(OPEN_PENDENCY).count(),
        'macas': qs.filter(situation=Patient.SITUATION_STRETCHER).count(),
        'cadeiras': qs.filter(situation=Patient.SITUATION_CHAIR).count(),
        'gargalos': qs.filter(pendencies__in=Patient.BOTTLENECK_PENDENCIES).count(),
        'bySpecialty': _by_specialty(qs),
    }


def available_months() -> list[str]:
    months = Patient.objects.datetimes('created_at', 'month', order='DESC')
    return [m.strftime('%Y-%m') for m in months]


def monthly_report(month: date) -> dict:
    """Admissions of one calendar month, archived ones included."""
    qs = Patient.objects.filter(created_at__year=month.year, created_at__month=month.month)
    return {
        'month': month.strftime('%Y-%m'),
        'total': qs.count(),
        'altas': qs.filter(status=Patient.STATUS_ALTA).count(),
        'upa': qs.filter(status=Patient.STATUS_TRANSFER_UPA).count(),
        'externo': qs.filter(status=Patient.STATUS_TRANSFER_EXTERNAL).count(),
        'internas': qs.filter(is_transfer_requested=True).exclude(status__in=Patient.TRANSFER_STATUSES).count(),
        'observacao': qs.filter(status=Patient.STATUS_OBSERVACAO).count(),
        'internados': qs.filter(status=Patient.STATUS_INTERNADO).count(),
        'pendencias': qs.filter(~Q(pendencies=Patient.PENDENCY_NONE)).count(),
        'specialtyData': _by_specialty(qs),
    }
