import django_filters
from moderation_app.models import ModerationLog


class ModerationLogFilter(django_filters.FilterSet):
    """
    A `FilterSet` for the audit trail, used by the moderation log endpoint.

    Attributes:
        admin_id (NumberFilter): Entries written by one admin.
        action_type (ChoiceFilter): Entries of one action type.
        entity_type (ChoiceFilter): Entries about one kind of object.
        entity_id (CharFilter): Entries about one object; combine with `entity_type`.
        created_after (IsoDateTimeFilter): Entries created at or after this time.
        created_before (IsoDateTimeFilter): Entries created at or before this time.
    """
    # Exposes the admin's primary key as `admin_id` rather than the relation name.
    admin_id = django_filters.NumberFilter(field_name="admin__id")
    action_type = django_filters.ChoiceFilter(choices=ModerationLog.ActionType.choices)
    entity_type = django_filters.ChoiceFilter(choices=ModerationLog.EntityType.choices)
    entity_id = django_filters.CharFilter(field_name="entity_id")

    # Inclusive created_at range.
    created_after = django_filters.IsoDateTimeFilter(field_name="created_at", lookup_expr='gte')
    created_before = django_filters.IsoDateTimeFilter(field_name="created_at", lookup_expr='lte')

    class Meta:
        model = ModerationLog
        fields = ['admin_id', 'action_type', 'entity_type', 'entity_id', 'created_after', 'created_before']
