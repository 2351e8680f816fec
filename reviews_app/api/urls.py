from django.urls import path, include
from rest_framework.routers import DefaultRouter

from .views import (
    CampsiteRecentReviewsView,
    CampsiteReviewListView,
    CampsiteReviewSummaryView,
    ReviewViewSet,
)

router = DefaultRouter()
router.register(r'reviews', ReviewViewSet, basename='review')

urlpatterns = [
    path('', include(router.urls)),
    path('campsites/<int:campsite_id>/reviews/', CampsiteReviewListView.as_view(), name='campsite-reviews'),
    path('campsites/<int:campsite_id>/reviews/summary/', CampsiteReviewSummaryView.as_view(),
         name='campsite-review-summary'),
    path('campsites/<int:campsite_id>/reviews/recent/', CampsiteRecentReviewsView.as_view(),
         name='campsite-recent-reviews'),
]
