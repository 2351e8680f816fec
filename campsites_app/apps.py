from django.apps import AppConfig


class CampsitesAppConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'campsites_app'
