"""Settings for preparing EAS (Ethereum Attestation Service) payloads"""

from decimal import Decimal

from .env import env

EAS_CHAIN_ID = env.int("EAS_CHAIN_ID", default=10)

# The GitcoinVerifier contract that validates our signature and forwards the
# attestations to EAS. It is also the source of truth for recipient nonces.
EAS_VERIFIER_ADDRESS = env(
    "EAS_VERIFIER_ADDRESS", default="0x0000000000000000000000000000000000000000"
)
EAS_VERIFIER_NAME = env("EAS_VERIFIER_NAME", default="GitcoinVerifier")
EAS_RPC_URL = env("EAS_RPC_URL", default="http://localhost:8545")

EAS_ATTESTATION_SIGNER_PRIVATE_KEY = env(
    "EAS_ATTESTATION_SIGNER_PRIVATE_KEY", default=""
)

EAS_STAMP_SCHEMA_UID = env(
    "EAS_STAMP_SCHEMA_UID",
    default="0x853a55f39e2d1bf1e6731ae7148976fbbb0c188a898a233dba61a233d8c0e4a4",
)
EAS_PASSPORT_SCHEMA_UID = env(
    "EAS_PASSPORT_SCHEMA_UID",
    default="0xd7b8c4ffa4c9fd1ec48a9cba4ac8fd1ec9b0e5b4a6f4c1a0e5b1d1a3c9e0f7b2",
)

# The verifier contract rejects MultiAttestationRequests above this size
EAS_MAX_ATTESTATIONS_PER_REQUEST = env.int(
    "EAS_MAX_ATTESTATIONS_PER_REQUEST", default=20
)

# Fee charged for an attestation, in USD, converted to wei on every request
EAS_FEE_USD = env("EAS_FEE_USD", cast=Decimal, default=Decimal("2"))
EAS_FEE_PARAMETERS_URL = env(
    "EAS_FEE_PARAMETERS_URL", default="http://localhost:8002/ceramic-cache/eth-price"
)

EAS_NONCE_RESERVATION_TTL_SECONDS = env.int(
    "EAS_NONCE_RESERVATION_TTL_SECONDS", default=300
)
