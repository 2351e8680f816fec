from django.contrib import admin
from .models import Campsite


class CampsiteAdmin(admin.ModelAdmin):
    list_display = ('id', 'name', 'owner', 'status', 'average_rating', 'review_count', 'updated_at')
    list_filter = ('status',)
    search_fields = ('name', 'owner__username')
    # Approval goes through the moderation endpoints so every decision is logged.
    readonly_fields = ('status', 'rejection_reason', 'average_rating', 'review_count')


# Register your models here.
admin.site.register(Campsite, CampsiteAdmin)
