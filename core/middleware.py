import uuid

from core.logging import add_context, clear_context


class RequestLogContextMiddleware:
    """
    Binds per-request values (request id, path, user) to the structlog context so every event
    logged while handling the request carries them.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        clear_context()
        add_context(
            request_id=request.headers.get('X-Request-ID') or uuid.uuid4().hex,
            path=request.path,
            method=request.method,
        )
        user = getattr(request, 'user', None)
        if user is not None and user.is_authenticated:
            add_context(user_id=user.pk)
        try:
            return self.get_response(request)
        finally:
            clear_context()
