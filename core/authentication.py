from rest_framework.authentication import SessionAuthentication, TokenAuthentication

from core.logging import add_context


class _BindUserMixin:
    """
    Adds the authenticated user's id to the log context.

    REST framework authenticates inside the view, after `RequestLogContextMiddleware` has
    run, so token-authenticated requests are only known here.
    """

    def authenticate(self, request):
        result = super().authenticate(request)
        if result is not None:
            add_context(user_id=result[0].pk)
        return result


class LogContextTokenAuthentication(_BindUserMixin, TokenAuthentication):
    pass


class LogContextSessionAuthentication(_BindUserMixin, SessionAuthentication):
    pass
