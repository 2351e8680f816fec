from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/', include('reviews_app.api.urls')),
    path('api/admin/', include('moderation_app.api.urls')),
]
