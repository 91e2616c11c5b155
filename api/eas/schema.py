from typing import List, Optional

from ninja import Schema
from pydantic import Field

ZERO_BYTES32 = "0x" + "00" * 32


class AttestationRequestData(Schema):
    recipient: str
    expirationTime: int = 0
    revocable: bool = True
    refUID: str = ZERO_BYTES32
    data: str
    value: int = 0


class MultiAttestationRequest(Schema):
    # `schema` is a BaseModel attribute, so the name is only used on the wire
    schema_uid: str = Field(serialization_alias="schema")
    data: List[AttestationRequestData]


class PassportAttestation(Schema):
    multiAttestationRequest: List[MultiAttestationRequest]
    nonce: int
    fee: int


class EasSignature(Schema):
    v: int
    r: str
    s: str


class EasPayload(Schema):
    passport: PassportAttestation
    signature: EasSignature
    invalidCredentials: List[dict] = []
    error: Optional[str] = None


class EasRequestBody(Schema):
    nonce: int
    credentials: List[dict]
    dbAccessToken: str
    recipient: Optional[str] = None
