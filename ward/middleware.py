import time
import uuid

import structlog

logger = structlog.get_logger(__name__)


class RequestLogMiddleware:
    """Bind a request id into the structlog context and log each API call."""
    HEADER = 'HTTP_X_REQUEST_ID'

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        request_id = request.META.get(self.HEADER) or uuid.uuid4().hex
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id=request_id, method=request.method, path=request.path)
        started = time.monotonic()
        response = self.get_response(request)
        if (request.path or '').startswith('/api/'):
            logger.info(
                'http.request',
                status=response.status_code,
                duration_ms=round((time.monotonic() - started) * 1000, 1),
            )
        response['X-Request-ID'] = request_id
        structlog.contextvars.clear_contextvars()
        return response
