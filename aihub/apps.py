from django.apps import AppConfig


class AihubConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'aihub'
    verbose_name = 'AI Hub'
