from django.conf import settings
from rest_framework import serializers, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from .. import services
from .errors import error_response
from .permissions import IsOwnerUser
from .serializers import (
    OwnerResponseSerializer,
    ReviewCreateSerializer,
    ReviewListQuerySerializer,
    ReviewReadSerializer,
    ReviewReportSerializer,
)


def _requesting_user_id(request):
    """The id of the signed-in user, or None for anonymous requests."""
    return request.user.pk if request.user and request.user.is_authenticated else None


class CampsiteReviewListView(APIView):
    """
    Lists the visible reviews of a campsite, one page at a time.

    Endpoint:
        GET /api/campsites/{campsite_id}/reviews/?page=&page_size=&sort_by=&reviewer_type=

    The listing is public. For signed-in users every review also tells whether they marked
    it as helpful.
    """
    permission_classes = [AllowAny]

    def get(self, request, campsite_id):
        query = ReviewListQuerySerializer(
            data=request.query_params,
            context={'max_page_size': settings.REVIEWS_MAX_PAGE_SIZE},
        )
        query.is_valid(raise_exception=True)
        params = query.validated_data
        page_size = params.get('page_size') or settings.REVIEWS_PAGE_SIZE

        page = services.list_reviews(
            campsite_id,
            page=params['page'],
            page_size=page_size,
            sort_by=params['sort_by'],
            reviewer_type=params.get('reviewer_type'),
            user_id=_requesting_user_id(request),
        )
        data = {
            'count': page.total,
            'page': params['page'],
            'page_size': page_size,
            'results': ReviewReadSerializer(page.reviews, many=True).data,
        }
        return Response(data, status=status.HTTP_200_OK)


class CampsiteReviewSummaryView(APIView):
    """
    Public rating summary of a campsite.

    Endpoint:
        GET /api/campsites/{campsite_id}/reviews/summary/
    """
    permission_classes = [AllowAny]

    def get(self, request, campsite_id):
        summary = services.get_review_summary(campsite_id)
        return Response(summary.as_dict(), status=status.HTTP_200_OK)


class RecentReviewsQuerySerializer(serializers.Serializer):
    limit = serializers.IntegerField(min_value=1, max_value=20, required=False)


class CampsiteRecentReviewsView(APIView):
    """
    The newest visible reviews of a campsite, as shown on the campsite detail page.

    Endpoint:
        GET /api/campsites/{campsite_id}/reviews/recent/?limit=
    """
    permission_classes = [AllowAny]

    def get(self, request, campsite_id):
        query = RecentReviewsQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        reviews = services.get_recent_reviews(campsite_id, limit=query.validated_data.get('limit'))
        return Response(ReviewReadSerializer(reviews, many=True).data, status=status.HTTP_200_OK)


class ReviewViewSet(viewsets.ViewSet):
    """
    Review endpoints that act on a single review.

    - `POST /api/reviews/`: Publishes a new review.
    - `GET /api/reviews/{id}/`: Retrieves a visible review.
    - `POST /api/reviews/{id}/helpful/`: Toggles the user's helpful vote.
    - `POST /api/reviews/{id}/report/`: Reports the review to the moderators.
    - `POST /api/reviews/{id}/response/`: Sets the campsite owner's response.

    All business rules live in `reviews_app.services`; the view validates input, calls the
    service and translates its typed result into an HTTP response.
    """
    lookup_value_regex = '[0-9]+'

    def get_permissions(self):
        """
        Dynamically assigns permissions based on the current action.

        - 'retrieve': public.
        - 'owner_response': only users with an owner profile.
        - everything else: any authenticated user.
        """
        if self.action == 'retrieve':
            self.permission_classes = [AllowAny]
        elif self.action == 'owner_response':
            self.permission_classes = [IsAuthenticated, IsOwnerUser]
        else:
            self.permission_classes = [IsAuthenticated]
        return super().get_permissions()

    def retrieve(self, request, pk=None):
        result = services.get_review(pk, user_id=_requesting_user_id(request))
        if not result.success:
            return error_response(result.error)
        return Response(ReviewReadSerializer(result.data).data)

    def create(self, request):
        """
        Validates the payload and publishes the review for the authenticated user.

        Returns the full review, including the author's display name and photos, with
        201 Created.
        """
        serializer = ReviewCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = services.create_review(serializer.validated_data, author_id=request.user.pk)
        if not result.success:
            return error_response(result.error)

        return Response(ReviewReadSerializer(result.data).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=['post'])
    def helpful(self, request, pk=None):
        result = services.toggle_helpful(pk, request.user.pk)
        if not result.success:
            return error_response(result.error)
        return Response({'voted': result.voted, 'helpful_count': result.helpful_count})

    @action(detail=True, methods=['post'])
    def report(self, request, pk=None):
        serializer = ReviewReportSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = services.report_review(
            pk,
            request.user.pk,
            serializer.validated_data['reason'],
            serializer.validated_data.get('details'),
        )
        if not result.success:
            return error_response(result.error)
        return Response({'detail': 'Review reported.'}, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=['post'], url_path='response')
    def owner_response(self, request, pk=None):
        serializer = OwnerResponseSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = services.add_owner_response(pk, request.user.pk, serializer.validated_data['response'])
        if not result.success:
            return error_response(result.error)
        return Response(ReviewReadSerializer(result.data).data)
