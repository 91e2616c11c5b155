# pylint: disable=redefined-outer-name
import json

import pytest
from django.conf import settings
from web3 import Web3

import credentials.record

web3 = Web3()
web3.eth.account.enable_unaudited_hdwallet_features()

my_mnemonic = settings.TEST_MNEMONIC

ISSUER_DID = "did:key:z6MkghvGHLobLEdj1bgRLhS4LPGJAvbMA1tn2zcRyqmYU5LC"
TEST_JWK = '{"kty":"OKP","crv":"Ed25519","x":"test","d":"test"}'
TEST_RECORD_SECRET = "test-record-secret"


@pytest.fixture(autouse=True)
def iam_keys(settings, monkeypatch):
    settings.IAM_JWK = TEST_JWK
    settings.IAM_RECORD_SECRET = TEST_RECORD_SECRET
    # The secret is cached on first use
    monkeypatch.setattr(credentials.record, "LOADED_RECORD_SECRET", None)


@pytest.fixture
def passport_holder_addresses():
    ret = []
    for i in range(5):
        web3_account = web3.eth.account.from_mnemonic(
            my_mnemonic, account_path=f"m/44'/60'/0'/0/{i + 1}"
        )
        ret.append(
            {
                "address": web3_account.address,
                "key": web3_account.key,
            }
        )

    return ret


@pytest.fixture
def attester_account():
    return web3.eth.account.from_mnemonic(my_mnemonic, account_path="m/44'/60'/0'/0/0")


def sign_with_fake_didkit(credential, options, jwk):
    signed = json.loads(credential)
    signed["proof"] = {
        "type": "Ed25519Signature2018",
        "proofPurpose": json.loads(options)["proofPurpose"],
        "verificationMethod": f"{ISSUER_DID}#z6MkghvGHLobLEdj1bgRLhS4LPGJAvbMA1tn2zcRyqmYU5LC",
        "created": signed["issuanceDate"],
        "jws": "eyJhbGciOiJFZERTQSJ9..fake",
    }
    return json.dumps(signed)


@pytest.fixture
def mock_didkit(mocker):
    """DIDKit replaced by a fake that signs everything and accepts every proof"""
    didkit = mocker.patch("credentials.issuer.didkit")
    didkit.key_to_did.return_value = ISSUER_DID
    didkit.key_to_verification_method = mocker.AsyncMock(
        return_value=f"{ISSUER_DID}#z6MkghvGHLobLEdj1bgRLhS4LPGJAvbMA1tn2zcRyqmYU5LC"
    )
    didkit.issue_credential = mocker.AsyncMock(side_effect=sign_with_fake_didkit)
    didkit.verify_credential = mocker.AsyncMock(
        return_value=json.dumps({"checks": ["proof"], "warnings": [], "errors": []})
    )
    return didkit
