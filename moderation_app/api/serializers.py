from rest_framework import serializers

from ..models import ModerationLog


class ModerationLogSerializer(serializers.ModelSerializer):
    """Read-only representation of an audit entry."""
    admin_username = serializers.CharField(source='admin.username', read_only=True)

    class Meta:
        model = ModerationLog
        fields = [
            'id',
            'admin',
            'admin_username',
            'action_type',
            'entity_type',
            'entity_id',
            'reason',
            'metadata',
            'created_at',
        ]
        read_only_fields = fields


class ReasonSerializer(serializers.Serializer):
    """Payload of actions where the admin must say why (hide, reject)."""
    reason = serializers.CharField(max_length=500)


class ReportedReviewsQuerySerializer(serializers.Serializer):
    """Query parameters of the moderation queue."""
    page = serializers.IntegerField(min_value=1, required=False, default=1)
    page_size = serializers.IntegerField(min_value=1, max_value=100, required=False)
    min_reports = serializers.IntegerField(min_value=1, required=False)
    sort_by = serializers.ChoiceField(choices=['report_count', 'created_at'], required=False,
                                      default='report_count')
    sort_order = serializers.ChoiceField(choices=['asc', 'desc'], required=False, default='desc')
