from django.apps import AppConfig


class CredentialsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "credentials"

    def ready(self):
        # pylint: disable=import-outside-toplevel
        from credentials.providers import load_providers

        load_providers()
