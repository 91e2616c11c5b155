"""Settings for the Ceramic stream storage the stamps are loaded from"""

from .env import env

CERAMIC_URL = env("CERAMIC_URL", default="http://localhost:7007")

# Upper bound for a single stream read
CERAMIC_TIMEOUT_SECONDS = env.int("CERAMIC_TIMEOUT_SECONDS", default=10)
