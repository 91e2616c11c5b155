import secrets
from datetime import timedelta

from django.conf import settings

import api_logging as logging

from .exceptions import InvalidChallengeRequest
from .issuer import DIDKitIssuer, get_issuer
from .models import IssuedChallenge
from .schema import RequestPayload
from .utils import format_date, get_did, get_utc_time

log = logging.getLogger(__name__)

CHALLENGE_PROVIDER_PREFIX = "challenge-"


def get_challenge_message(nonce: str) -> str:
    return f"""I commit that this wallet is under my control and that I wish to create a Passport with the requested stamps.

nonce: {nonce}
"""


def get_challenge_provider(provider_type: str) -> str:
    return f"{CHALLENGE_PROVIDER_PREFIX}{provider_type}"


async def aissue_challenge(
    payload: RequestPayload, issuer: DIDKitIssuer = None
) -> dict:
    """
    Create and sign a challenge credential for `payload.type` and
    `payload.address`. The client answers it by signing the challenge message
    with the wallet that owns the address.
    """
    if not payload.address or not payload.type:
        raise InvalidChallengeRequest(detail="Missing address or type in payload.")

    issuer = issuer or get_issuer()

    now = get_utc_time()
    expires_on = now + timedelta(seconds=settings.CHALLENGE_EXPIRES_AFTER_SECONDS)
    provider = get_challenge_provider(payload.type)
    message = get_challenge_message(secrets.token_hex(32))

    challenge = await issuer.aissue_credential(
        {
            "@context": ["https://www.w3.org/2018/credentials/v1"],
            "type": ["VerifiableCredential"],
            "issuanceDate": format_date(now),
            "expirationDate": format_date(expires_on),
            "credentialSubject": {
                "@context": [
                    {
                        "provider": "https://schema.org/Text",
                        "challenge": "https://schema.org/Text",
                        "address": "https://schema.org/Text",
                    }
                ],
                "id": get_did(payload.address),
                "provider": provider,
                "challenge": message,
                "address": payload.address,
            },
        }
    )

    await IssuedChallenge.objects.acreate(
        challenge=message,
        provider=provider,
        address=payload.address,
        expires_on=expires_on,
    )

    log.info(
        "Issued challenge for provider='%s' address='%s'", provider, payload.address
    )
    return challenge
