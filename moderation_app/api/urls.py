from django.urls import path, include
from rest_framework.routers import DefaultRouter

from .views import (
    CampsiteModerationViewSet,
    ModerationLogViewSet,
    OwnerRequestModerationViewSet,
    ReportedReviewListView,
    ReviewModerationViewSet,
)

router = DefaultRouter()
router.register(r'reviews', ReviewModerationViewSet, basename='admin-review')
router.register(r'campsites', CampsiteModerationViewSet, basename='admin-campsite')
router.register(r'owner-requests', OwnerRequestModerationViewSet, basename='admin-owner-request')
router.register(r'moderation-logs', ModerationLogViewSet, basename='moderation-log')

urlpatterns = [
    path('reviews/reported/', ReportedReviewListView.as_view(), name='admin-reported-reviews'),
    path('', include(router.urls)),
]
