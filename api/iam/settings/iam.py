"""Settings for challenge issuance and credential verification"""

from .env import env

# Ed25519 JWK used by DIDKit to sign challenges and credentials
IAM_JWK = env("IAM_JWK", default="")

# Salt mixed into every proof record hash. Loaded once per process, see
# credentials.record.get_record_secret. Rotating it means restarting the
# service with the new value, after which freshly computed hashes no longer
# match the ones on previously issued credentials.
IAM_RECORD_SECRET = env("IAM_RECORD_SECRET", default="")

# Network used when building the `did:pkh:eip155:<network>:<address>` subject
IAM_DID_NETWORK = env("IAM_DID_NETWORK", default="1")

CHALLENGE_EXPIRES_AFTER_SECONDS = env.int(
    "CHALLENGE_EXPIRES_AFTER_SECONDS", default=300
)

# Default lifetime of an issued credential, providers may override it
CREDENTIAL_EXPIRES_AFTER_SECONDS = env.int(
    "CREDENTIAL_EXPIRES_AFTER_SECONDS", default=90 * 24 * 60 * 60
)

# Dotted paths of the Provider classes registered on startup
IAM_PROVIDERS = env.list("IAM_PROVIDERS", default=[])
