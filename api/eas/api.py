"""Attestation API"""

from ninja import Router

from credentials.schema import ErrorMessageResponse

from .attestation import aprepare_attestation
from .schema import EasPayload, EasRequestBody

router = Router()


@router.post(
    "/eas/passport",
    response={
        200: EasPayload,
        400: ErrorMessageResponse,
        500: ErrorMessageResponse,
        503: ErrorMessageResponse,
    },
    by_alias=True,
    summary="Prepare a passport attestation",
    description="""Validate the submitted credentials and return the signed payload to submit to the verifier contract.\n
Credentials that can not be attested are returned in `invalidCredentials`.""",
)
async def passport(request, body: EasRequestBody) -> EasPayload:
    return await aprepare_attestation(body)
