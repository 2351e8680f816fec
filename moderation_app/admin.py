from django.contrib import admin
from .models import ModerationLog


class ModerationLogAdmin(admin.ModelAdmin):
    """Read-only view of the audit trail."""
    list_display = ('created_at', 'admin', 'action_type', 'entity_type', 'entity_id', 'reason')
    list_filter = ('action_type', 'entity_type')
    search_fields = ('entity_id', 'admin__username')

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


# Register your models here.
admin.site.register(ModerationLog, ModerationLogAdmin)
