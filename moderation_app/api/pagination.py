from django.conf import settings
from rest_framework.pagination import PageNumberPagination


class ModerationLogPagination(PageNumberPagination):
    """
    Pages through the audit trail. Admins may pick a page size with `?page_size=`, capped
    at `MODERATION_LOG_MAX_PAGE_SIZE`.
    """
    page_size = settings.MODERATION_LOG_PAGE_SIZE
    page_size_query_param = 'page_size'
    max_page_size = settings.MODERATION_LOG_MAX_PAGE_SIZE
