"""Credentials API"""

from typing import List, Union

from ninja import Router

import api_logging as logging

from .challenge import aissue_challenge
from .schema import (
    ChallengeRequestBody,
    CheckRequestBody,
    CheckResponseBody,
    CredentialResponseBody,
    ErrorMessageResponse,
    IssuedChallengeResponse,
    VerifyRequestBody,
)
from .verifier import acheck_types, averify_credentials

log = logging.getLogger(__name__)

router = Router()


@router.post(
    "/challenge",
    response={
        200: IssuedChallengeResponse,
        400: ErrorMessageResponse,
        500: ErrorMessageResponse,
    },
    summary="Request a challenge",
    description="Issue a short-lived challenge the requester must sign with the wallet that owns the address.",
)
async def challenge(request, body: ChallengeRequestBody) -> IssuedChallengeResponse:
    return IssuedChallengeResponse(challenge=await aissue_challenge(body.payload))


@router.post(
    "/verify",
    response={
        200: Union[CredentialResponseBody, List[CredentialResponseBody]],
        500: ErrorMessageResponse,
    },
    summary="Verify a signed challenge",
    description="""Verify the signed challenge and the proofs for each requested provider.\n
A credential is returned for every provider that passed, an `error` and `code` for every one that did not.\n
When more than one type is requested in `types`, a list is returned in the order of the request.""",
)
async def verify(request, body: VerifyRequestBody):
    results = await averify_credentials(body.challenge, body.payload)
    if body.payload.types and len(body.payload.types) > 1:
        return results
    return results[0]


@router.post(
    "/check",
    response={
        200: Union[CheckResponseBody, List[CheckResponseBody]],
        500: ErrorMessageResponse,
    },
    summary="Check the proofs for providers",
    description="""Run the providers for the requested types without a challenge. No credential is issued.\n
When more than one type is requested in `types`, a list is returned in the order of the request.""",
)
async def check(request, body: CheckRequestBody):
    results = await acheck_types(body.payload)
    if body.payload.types and len(body.payload.types) > 1:
        return results
    return results[0]
