from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.views import APIView
from django.conf import settings
from django_filters.rest_framework import DjangoFilterBackend

from reviews_app import services as review_services
from reviews_app.api.errors import error_response
from reviews_app.api.serializers import ReportedReviewSerializer
from .. import services
from ..models import ModerationLog
from .filters import ModerationLogFilter
from .pagination import ModerationLogPagination
from .permissions import IsAdminProfile
from .serializers import ModerationLogSerializer, ReasonSerializer, ReportedReviewsQuerySerializer


def _result_response(result):
    """Success payload with 200 OK, or the mapped error response."""
    if not result.success:
        return error_response(result.error)
    return Response({'success': True, **result.data}, status=status.HTTP_200_OK)


class ReportedReviewListView(APIView):
    """
    The moderation queue: reported reviews that are still visible.

    Endpoint:
        GET /api/admin/reviews/reported/?page=&page_size=&min_reports=&sort_by=&sort_order=

    Ordered by report count, most reported first, unless `sort_by`/`sort_order` say
    otherwise. Each review includes its individual reports and who filed them.
    """
    permission_classes = [IsAdminProfile]

    def get(self, request, format=None):
        query = ReportedReviewsQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        params = query.validated_data
        page_size = params.get('page_size') or settings.REPORTED_REVIEWS_PAGE_SIZE

        page = review_services.get_reported_reviews(
            page=params['page'],
            page_size=page_size,
            min_reports=params.get('min_reports'),
            sort_by=params['sort_by'],
            sort_order=params['sort_order'],
        )
        data = {
            'count': page.total,
            'page': params['page'],
            'page_size': page_size,
            'results': ReportedReviewSerializer(page.reviews, many=True).data,
        }
        return Response(data, status=status.HTTP_200_OK)


class ReviewModerationViewSet(viewsets.ViewSet):
    """
    Admin actions on a single review. Every successful action is written to the
    moderation log.

    - `POST /api/admin/reviews/{id}/hide/`: Hides the review (requires `reason`).
    - `POST /api/admin/reviews/{id}/unhide/`: Makes it visible again.
    - `POST /api/admin/reviews/{id}/dismiss/`: Clears its reports.
    """
    permission_classes = [IsAdminProfile]
    lookup_value_regex = '[0-9]+'

    @action(detail=True, methods=['post'])
    def hide(self, request, pk=None):
        serializer = ReasonSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = services.moderate_hide_review(pk, request.user.pk, serializer.validated_data['reason'])
        return _result_response(result)

    @action(detail=True, methods=['post'])
    def unhide(self, request, pk=None):
        return _result_response(services.moderate_unhide_review(pk, request.user.pk))

    @action(detail=True, methods=['post'])
    def dismiss(self, request, pk=None):
        return _result_response(services.dismiss_reports(pk, request.user.pk))


class CampsiteModerationViewSet(viewsets.ViewSet):
    """
    Approval decisions on pending campsites.

    - `POST /api/admin/campsites/{id}/approve/`
    - `POST /api/admin/campsites/{id}/reject/` (requires `reason`)
    """
    permission_classes = [IsAdminProfile]
    lookup_value_regex = '[0-9]+'

    @action(detail=True, methods=['post'])
    def approve(self, request, pk=None):
        return _result_response(services.approve_campsite(pk, request.user.pk))

    @action(detail=True, methods=['post'])
    def reject(self, request, pk=None):
        serializer = ReasonSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = services.reject_campsite(pk, request.user.pk, serializer.validated_data['reason'])
        return _result_response(result)


class OwnerRequestModerationViewSet(viewsets.ViewSet):
    """
    Decisions on pending owner requests. Approval upgrades the applicant to the owner role.

    - `POST /api/admin/owner-requests/{id}/approve/`
    - `POST /api/admin/owner-requests/{id}/reject/` (requires `reason`)
    """
    permission_classes = [IsAdminProfile]
    lookup_value_regex = '[0-9]+'

    @action(detail=True, methods=['post'])
    def approve(self, request, pk=None):
        return _result_response(services.approve_owner_request(pk, request.user.pk))

    @action(detail=True, methods=['post'])
    def reject(self, request, pk=None):
        serializer = ReasonSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = services.reject_owner_request(pk, request.user.pk, serializer.validated_data['reason'])
        return _result_response(result)


class ModerationLogViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Read-only access to the audit trail, newest entries first.

    - `GET /api/admin/moderation-logs/`: Paginated list, filterable by `admin_id`,
      `action_type`, `entity_type`, `entity_id`, `created_after` and `created_before`.
    - `GET /api/admin/moderation-logs/{id}/`: A single entry.
    """
    queryset = ModerationLog.objects.all().select_related('admin')
    serializer_class = ModerationLogSerializer
    permission_classes = [IsAdminProfile]
    pagination_class = ModerationLogPagination
    filter_backends = [DjangoFilterBackend]
    filterset_class = ModerationLogFilter
