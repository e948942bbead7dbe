import structlog
from django.db import DatabaseError, connections
from django.http import JsonResponse

from ward.models import Collaborator

logger = structlog.get_logger(__name__)


def healthz(request):
    try:
        with connections['default'].cursor() as c:
            c.execute('SELECT 1')
            row = c.fetchone()
        seeded = Collaborator.objects.filter(id=Collaborator.MASTER_ID).exists()
    except DatabaseError as e:
        logger.error('healthz.db_error', error=str(e))
        return JsonResponse({'ok': False, 'error': str(e)}, status=500)
    return JsonResponse({'ok': True, 'db': bool(row and row[0] == 1), 'seeded': seeded})
