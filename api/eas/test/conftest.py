# pylint: disable=redefined-outer-name
import base64
import hashlib
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
from web3 import Web3

from conftest import ISSUER_DID
from credentials.utils import format_date, get_did
from eas.nonce import NonceSource

NOW = datetime(2023, 6, 1, 12, 0, 0, tzinfo=timezone.utc)

VERIFIER_ADDRESS = "0xc0fFEE0000000000000000000000000000000001"


class FakeNonceSource(NonceSource):
    def __init__(self, nonce: int = 0):
        self.nonce = nonce
        self.recipients = []

    async def aget_nonce(self, recipient: str) -> int:
        self.recipients.append(recipient)
        if isinstance(self.nonce, Exception):
            raise self.nonce
        return self.nonce


def stamp_hash(provider: str) -> str:
    digest = hashlib.sha256(provider.encode("utf-8")).digest()
    return f"v0.0.0:{base64.b64encode(digest).decode('utf-8')}"


def stamp_credential(
    provider: str,
    address: str,
    expires_in: timedelta = timedelta(days=90),
    issuer: str = ISSUER_DID,
) -> dict:
    return {
        "@context": ["https://www.w3.org/2018/credentials/v1"],
        "type": ["VerifiableCredential"],
        "issuer": issuer,
        "issuanceDate": format_date(NOW - timedelta(days=1)),
        "expirationDate": format_date(NOW + expires_in),
        "credentialSubject": {
            "@context": [
                {
                    "hash": "https://schema.org/Text",
                    "provider": "https://schema.org/Text",
                }
            ],
            "id": get_did(address),
            "provider": provider,
            "hash": stamp_hash(provider),
        },
        "proof": {
            "type": "Ed25519Signature2018",
            "proofPurpose": "assertionMethod",
            "jws": "eyJhbGciOiJFZERTQSJ9..fake",
        },
    }


@pytest.fixture(autouse=True)
def eas_settings(settings, attester_account):
    settings.EAS_ATTESTATION_SIGNER_PRIVATE_KEY = Web3.to_hex(attester_account.key)
    settings.EAS_VERIFIER_ADDRESS = VERIFIER_ADDRESS
    settings.EAS_CHAIN_ID = 10
    settings.EAS_FEE_USD = Decimal("2")
    settings.FF_PASSPORT_BITMAP_ATTESTATION = "on"


@pytest.fixture
def recipient(passport_holder_addresses):
    return passport_holder_addresses[0]["address"]


@pytest.fixture
def nonce_source():
    return FakeNonceSource(nonce=7)


@pytest.fixture
def mock_fee(mocker):
    # 2 USD at 2000 USD/ETH
    return mocker.patch(
        "eas.attestation.aget_fee", mocker.AsyncMock(return_value=10**15)
    )
