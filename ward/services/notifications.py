"""
Badge counters, the pendency reminder rule and the realtime fan-out.

Counters are computed over active patients (``is_transferred`` false).
Clients subscribed to ``ws/updates/`` receive a ``patients.changed``
event after every committed patient write and a ``pendency.reminder``
event from the periodic reminder command.
"""
from __future__ import annotations

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.conf import settings
from django.db.models import Q
from django.utils import timezone
import structlog

from ward.models import Collaborator, Patient

logger = structlog.get_logger(__name__)

UPDATES_GROUP = 'updates'

OPEN_PENDENCY = (
    ~Q(pendencies=Patient.PENDENCY_NONE)
    | Q(has_bracelet=False)
    | Q(has_bed_identification=False)
)

# roles that get the reminder right after logging in
LOGIN_REMINDER_ROLES = (Collaborator.ROLE_TECNICO, Collaborator.ROLE_ENFERMEIRO)


def active_patients():
    return Patient.objects.filter(is_transferred=False)


def pendency_count() -> int:
    return active_patients().filter(OPEN_PENDENCY).count()


def transfer_request_count() -> int:
    return active_patients().filter(is_transfer_requested=True).count()


def new_patients_count() -> int:
    return active_patients().filter(is_new=True).count()


def badge_counts(role: str) -> dict:
    data = {
        'pendencies': pendency_count(),
        'transferRequests': transfer_request_count(),
        'newPatients': None,
    }
    if role != Collaborator.ROLE_TECNICO:
        data['newPatients'] = new_patients_count()
    return data


def should_remind(role: str, *, on_login: bool, count: int | None = None) -> bool:
    """Whether the "pendências abertas" reminder should pop up.

    On login only technicians and nurses are reminded; the periodic
    reminder applies to every role.  Nothing is shown without pendencies.
    """
    if count is None:
        count = pendency_count()
    if count <= 0:
        return False
    if on_login:
        return role in LOGIN_REMINDER_ROLES
    return True


def broadcast(event_type: str, **payload) -> bool:
    """Send an event to every connected client; failures are logged only."""
    channel_layer = get_channel_layer()
    if channel_layer is None:
        return False
    now = timezone.now()
    event = {'type': event_type, 'ts': now.isoformat(), **payload}
    try:
        async_to_sync(channel_layer.group_send)(UPDATES_GROUP, event)
    except Exception as exc:  # the write is already committed
        logger.warning('realtime.broadcast_failed', event_type=event_type, error=str(exc))
        return False
    return True


def notify_patients_changed(ids) -> bool:
    return broadcast('patients.changed', ids=list(ids)[:50], version=int(timezone.now().timestamp()))


def send_pendency_reminder() -> int:
    count = pendency_count()
    if count > 0:
        broadcast(
            'pendency.reminder',
            pendencies=count,
            intervalMinutes=settings.HOSPFLOW_REMINDER_INTERVAL_MINUTES,
            target='PENDENCIES',
        )
    return count
