"""Credentials API Schema"""

from typing import Dict, List, Optional

from ninja import Schema


class SignerPayload(Schema):
    challenge: dict
    signature: str
    address: str


class RequestPayload(Schema):
    type: str
    types: Optional[List[str]] = None
    address: str
    version: str
    proofs: Optional[Dict[str, str]] = None
    signer: Optional[SignerPayload] = None
    challenge: Optional[str] = None
    issuer: Optional[str] = None

    def requested_types(self) -> List[str]:
        return self.types if self.types else [self.type]


class VerifiedPayload(Schema):
    """Result of a single provider check"""

    valid: bool
    error: List[str] = []
    # Combined with the proof record built from the payload
    record: Optional[Dict[str, str]] = None
    expires_in_seconds: Optional[int] = None


# The challenge check returns the same shape, with the challenge in the record
ChallengePayload = VerifiedPayload


class ChallengeRequestBody(Schema):
    payload: RequestPayload


class VerifyRequestBody(Schema):
    challenge: dict
    payload: RequestPayload


class IssuedChallengeResponse(Schema):
    challenge: dict


class CredentialResponseBody(Schema):
    credential: Optional[dict] = None
    record: Optional[Dict[str, str]] = None
    error: Optional[str] = None
    code: Optional[int] = None


class CheckRequestBody(Schema):
    payload: RequestPayload


class CheckResponseBody(Schema):
    valid: bool
    type: str
    error: Optional[str] = None
    code: Optional[int] = None


class ErrorMessageResponse(Schema):
    detail: str
