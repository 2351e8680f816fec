from django.apps import AppConfig


class ReviewsAppConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'reviews_app'

    def ready(self):
        # Registers the counter receivers.
        from . import signals  # noqa: F401
