"""
Logging shim used throughout the project: `import api_logging as logging`

Depending on `settings.LOGGING_STRATEGY` this resolves to structlog or to the
standard library logging module, so callers only ever use `getLogger`.
"""

from django.conf import settings

STRUCTLOG_STRATEGIES = ("structlog_json", "structlog_flatline")

if settings.LOGGING_STRATEGY in STRUCTLOG_STRATEGIES:
    from structlog import *  # noqa: F403
else:
    from logging import *  # noqa: F403
