from django.contrib import admin
from .models import HelpfulVote, Review, ReviewPhoto, ReviewReport


class ReviewPhotoInline(admin.TabularInline):
    model = ReviewPhoto
    extra = 0


class ReviewAdmin(admin.ModelAdmin):
    list_display = ('id', 'campsite', 'user', 'rating_overall', 'helpful_count',
                    'report_count', 'is_hidden', 'created_at')
    list_filter = ('is_hidden', 'is_reported', 'reviewer_type')
    search_fields = ('title', 'content', 'campsite__name', 'user__username')
    inlines = (ReviewPhotoInline,)
    # Counters and moderation state change only through their own workflows.
    readonly_fields = ('helpful_count', 'is_reported', 'report_count', 'is_hidden',
                       'hidden_reason', 'hidden_at', 'hidden_by')


class ReviewReportAdmin(admin.ModelAdmin):
    list_display = ('id', 'review', 'user', 'reason', 'created_at')
    list_filter = ('reason',)


# Register your models here.
admin.site.register(Review, ReviewAdmin)
admin.site.register(ReviewReport, ReviewReportAdmin)
admin.site.register(HelpfulVote)
