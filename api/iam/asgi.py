"""
ASGI config for the iam project.

The verification and attestation endpoints are async, so the service is
served through ASGI.
"""

import os

from django.core.asgi import get_asgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "iam.settings")

application = get_asgi_application()
