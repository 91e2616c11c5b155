from django.apps import AppConfig


class EasConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "eas"
