from django.core.exceptions import ObjectDoesNotExist
from rest_framework import serializers

from ..models import Review, ReviewPhoto, ReviewReport


def _profile(user):
    """Returns the user's profile, or None for accounts that have none yet."""
    try:
        return user.profile
    except ObjectDoesNotExist:
        return None


def _display_name(user):
    profile = _profile(user)
    return profile.display_name if profile else 'Anonymous'


class ReviewPhotoSerializer(serializers.ModelSerializer):
    class Meta:
        model = ReviewPhoto
        fields = ['id', 'url', 'sort_order']


class ReviewReadSerializer(serializers.ModelSerializer):
    """
    Serializer for the `Review` model, intended for read-only operations.

    Besides the stored fields it adds the author's public identity (`reviewer_name`,
    `reviewer_avatar`), the ordered photos and, when the service looked it up for the
    requesting user, whether that user marked the review as helpful. Moderation internals
    (`hidden_by`, report counters) are not part of the public representation.
    """
    reviewer_name = serializers.SerializerMethodField()
    reviewer_avatar = serializers.SerializerMethodField()
    photos = ReviewPhotoSerializer(many=True, read_only=True)
    user_helpful_vote = serializers.SerializerMethodField()

    class Meta:
        """Meta class to configure the serializer's behavior."""
        model = Review
        fields = [
            'id',
            'campsite',
            'user',
            'reviewer_name',
            'reviewer_avatar',
            'rating_overall',
            'rating_cleanliness',
            'rating_staff',
            'rating_facilities',
            'rating_value',
            'rating_location',
            'reviewer_type',
            'title',
            'content',
            'pros',
            'cons',
            'visited_at',
            'helpful_count',
            'photos',
            'user_helpful_vote',
            'owner_response',
            'owner_response_at',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields

    def get_reviewer_name(self, obj):
        return _display_name(obj.user)

    def get_reviewer_avatar(self, obj):
        profile = _profile(obj.user)
        return profile.avatar_url if profile else None

    def get_user_helpful_vote(self, obj):
        # Only present when the listing was requested by a signed-in user.
        return getattr(obj, 'user_helpful_vote', None)


class ReviewCreateSerializer(serializers.Serializer):
    """
    Validates the payload of a new review.

    The author is never taken from the payload; the view passes the authenticated user to
    the service. Duplicate and campsite-eligibility checks live in the service because they
    need the database state at insert time.
    """
    campsite_id = serializers.IntegerField(min_value=1)
    rating_overall = serializers.IntegerField(min_value=1, max_value=5)
    rating_cleanliness = serializers.IntegerField(min_value=1, max_value=5, required=False, allow_null=True)
    rating_staff = serializers.IntegerField(min_value=1, max_value=5, required=False, allow_null=True)
    rating_facilities = serializers.IntegerField(min_value=1, max_value=5, required=False, allow_null=True)
    rating_value = serializers.IntegerField(min_value=1, max_value=5, required=False, allow_null=True)
    rating_location = serializers.IntegerField(min_value=1, max_value=5, required=False, allow_null=True)
    reviewer_type = serializers.ChoiceField(choices=Review.ReviewerType.choices)
    title = serializers.CharField(max_length=100, required=False, allow_blank=True)
    content = serializers.CharField(min_length=20, max_length=2000)
    pros = serializers.CharField(max_length=500, required=False, allow_blank=True, allow_null=True)
    cons = serializers.CharField(max_length=500, required=False, allow_blank=True, allow_null=True)
    visited_at = serializers.DateField(required=False, allow_null=True)
    photo_urls = serializers.ListField(
        child=serializers.URLField(max_length=500),
        required=False,
        max_length=5,
    )


class ReviewReportSerializer(serializers.Serializer):
    reason = serializers.ChoiceField(choices=ReviewReport.Reason.choices)
    details = serializers.CharField(max_length=500, required=False, allow_blank=True, allow_null=True)


class OwnerResponseSerializer(serializers.Serializer):
    response = serializers.CharField(max_length=2000)


class ReviewListQuerySerializer(serializers.Serializer):
    """Validates the query parameters of the review listing."""
    page = serializers.IntegerField(min_value=1, required=False, default=1)
    page_size = serializers.IntegerField(min_value=1, required=False)
    sort_by = serializers.ChoiceField(
        choices=['newest', 'rating_high', 'rating_low', 'helpful'],
        required=False,
        default='newest',
    )
    reviewer_type = serializers.ChoiceField(choices=Review.ReviewerType.choices, required=False)

    def validate_page_size(self, value):
        max_page_size = self.context.get('max_page_size')
        if max_page_size and value > max_page_size:
            return max_page_size
        return value


class ReportedReviewSerializer(ReviewReadSerializer):
    """A review in the moderation queue, with its report counters and individual reports."""
    reports = serializers.SerializerMethodField()

    class Meta(ReviewReadSerializer.Meta):
        fields = ReviewReadSerializer.Meta.fields + ['is_reported', 'report_count', 'reports']
        read_only_fields = fields

    def get_reports(self, obj):
        return [
            {
                'id': report.id,
                'reason': report.reason,
                'details': report.details,
                'reporter_id': report.user_id,
                'reporter_name': _display_name(report.user),
                'created_at': serializers.DateTimeField().to_representation(report.created_at),
            }
            for report in obj.reports.all()
        ]
