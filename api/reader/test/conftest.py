# pylint: disable=redefined-outer-name
from typing import Dict, Optional, Union

import pytest

from reader.storage import PassportStorage

DID = "did:pkh:eip155:1:0x434b56e01a8bdd9ab8ae5ef1acf86e3372a877c3"


def stamp_credential(provider: str, did: str = DID) -> dict:
    return {
        "type": ["VerifiableCredential"],
        "proof": {
            "jws": "eyJhbGciOiJFZERTQSIsImNyaXQiOlsiYjY0Il0sImI2NCI6ZmFsc2V9..fake",
            "type": "Ed25519Signature2018",
            "created": "2022-11-23T15:30:51.720Z",
            "proofPurpose": "assertionMethod",
            "verificationMethod": "did:key:z6MkghvGHLobLEdj1bgRLhS4LPGJAvbMA1tn2zcRyqmYU5LC#z6MkghvGHLobLEdj1bgRLhS4LPGJAvbMA1tn2zcRyqmYU5LC",
        },
        "issuer": "did:key:z6MkghvGHLobLEdj1bgRLhS4LPGJAvbMA1tn2zcRyqmYU5LC",
        "@context": ["https://www.w3.org/2018/credentials/v1"],
        "issuanceDate": "2022-11-23T15:30:51.720Z",
        "expirationDate": "2099-02-21T15:30:51.720Z",
        "credentialSubject": {
            "id": did,
            "hash": "v0.0.0:zwvwqJiGNkDi2wZgimC4nUf5fdMJ8HIpg8pzXAViLSI=",
            "@context": [
                {
                    "hash": "https://schema.org/Text",
                    "provider": "https://schema.org/Text",
                }
            ],
            "provider": provider,
        },
    }


class FakeStorage(PassportStorage):
    """Passports and stamps held in memory, an Exception value is raised on read"""

    def __init__(
        self,
        passports: Optional[Dict[str, Union[dict, Exception]]] = None,
        stamps: Optional[Dict[str, Union[dict, Exception]]] = None,
    ):
        self.passports = passports or {}
        self.stamps = stamps or {}
        self.loaded_stream_ids = []
        self.is_open = False

    async def __aenter__(self):
        self.is_open = True
        return self

    async def __aexit__(self, *exc_info):
        self.is_open = False

    async def aget_passport(self, did: str) -> Optional[dict]:
        passport = self.passports.get(did)
        if isinstance(passport, Exception):
            raise passport
        return passport

    async def aget_stamp(self, stream_id: str) -> dict:
        self.loaded_stream_ids.append(stream_id)
        stamp = self.stamps[stream_id]
        if isinstance(stamp, Exception):
            raise stamp
        return stamp


@pytest.fixture
def passport_record():
    return {
        "issuanceDate": "2023-01-01T00:00:00.000Z",
        "expiryDate": "2023-04-01T00:00:00.000Z",
        "stamps": [
            {"provider": "Google", "streamId": "id1"},
            {"provider": "Ens", "streamId": "id2"},
            {"provider": "Github", "streamId": "id3"},
        ],
    }


@pytest.fixture
def stamps():
    return {
        "id1": stamp_credential("Google"),
        "id2": stamp_credential("Ens"),
        "id3": stamp_credential("Github"),
    }


@pytest.fixture
def storage(passport_record, stamps):
    return FakeStorage(passports={DID: passport_record}, stamps=stamps)
