from typing import Optional, Any, Dict

import structlog
from django.contrib.auth import get_user_model

from ward.models import AuditEvent

User = get_user_model()
logger = structlog.get_logger(__name__)


def log_action(*, user: Optional[User], action: str, object_type: Optional[str]=None, object_id: Optional[str]=None, detail: Optional[Dict[str, Any]]=None) -> AuditEvent:
    """Persist an audit event and mirror it to the structured log."""
    actor = user if isinstance(user, User) and user.pk else None
    logger.info('audit', action=action, object_type=object_type, object_id=object_id,
                actor=getattr(actor, 'login', None))
    return AuditEvent.objects.create(
        user=actor,
        action=action,
        object_type=object_type,
        object_id=str(object_id) if object_id is not None else None,
        detail=detail or {},
    )
