from datetime import timedelta
from typing import List, Optional, Tuple

from django.conf import settings
from eth_account.messages import encode_defunct
from web3 import Web3

import api_logging as logging

from .challenge import get_challenge_provider
from .context import ProviderContext
from .exceptions import ContextCorruption
from .issuer import DIDKitIssuer, get_issuer
from .models import IssuedChallenge
from .providers import ProviderRegistry
from .providers import registry as default_registry
from .record import build_proof_record, hash_record
from .schema import (
    ChallengePayload,
    CheckResponseBody,
    CredentialResponseBody,
    RequestPayload,
    VerifiedPayload,
)
from .utils import format_date, get_did, get_utc_time, parse_date

log = logging.getLogger(__name__)

web3 = Web3()

CODE_BAD_REQUEST = 400
CODE_UNAUTHORIZED = 401
CODE_FORBIDDEN = 403
CODE_INTERNAL_ERROR = 500

# Address of the second wallet that answered a challenge, lowercase
SIGNER_CONTEXT_KEY = "signer"


def get_signer(message: str, signature: str) -> str:
    encoded_message = encode_defunct(text=message)
    return web3.eth.account.recover_message(encoded_message, signature=signature)


async def acheck_challenge(
    challenge: dict,
    address: str,
    provider_type: str,
    signature: Optional[str],
    issuer: DIDKitIssuer,
) -> List[str]:
    """
    Return the reasons `challenge` is not a valid answered challenge for
    `provider_type` and `address`, empty if it is one.
    """
    subject = challenge.get("credentialSubject") or {}

    try:
        expires_on = parse_date(challenge["expirationDate"])
    except (KeyError, TypeError, ValueError):
        return ["Invalid challenge: missing expiration"]

    if expires_on <= get_utc_time():
        return ["Challenge has expired"]

    errors = []
    if str(subject.get("address", "")).lower() != address.lower():
        errors.append("Challenge was issued for a different address")
    if subject.get("provider") != get_challenge_provider(provider_type):
        errors.append(f"Challenge was not issued for provider {provider_type}")
    if not subject.get("challenge"):
        errors.append("Invalid challenge: missing challenge message")
    if errors:
        return errors

    if challenge.get("issuer") != issuer.did:
        return ["Challenge was not issued by this service"]

    proof_errors = await issuer.averify_credential(challenge)
    if proof_errors:
        log.info("Challenge proof rejected for address='%s'", address)
        return ["Invalid challenge proof"]

    if not signature:
        return ["Missing challenge signature"]

    try:
        signer = get_signer(subject["challenge"], signature)
    except Exception:
        log.info("Unable to recover challenge signer", exc_info=True)
        return ["Invalid challenge signature"]

    if signer.lower() != address.lower():
        return ["Challenge signature does not match the address"]

    return []


async def averify_challenge(
    challenge: dict, payload: RequestPayload, issuer: DIDKitIssuer
) -> ChallengePayload:
    """
    Check that `challenge` was issued by us for this provider and address, has
    not expired, and that the payload carries the address owner's signature
    over the challenge message.

    The payload may also name the challenge message and the issuer it expects,
    and carry a `signer`: a second wallet that answered its own challenge for
    the same provider. Both challenges must pass.
    """
    errors = await acheck_challenge(
        challenge,
        payload.address,
        payload.type,
        (payload.proofs or {}).get("signature"),
        issuer,
    )
    if errors:
        return ChallengePayload(valid=False, error=errors)

    message = challenge["credentialSubject"]["challenge"]
    if payload.challenge is not None and payload.challenge != message:
        return ChallengePayload(
            valid=False, error=["Challenge does not match the payload"]
        )
    if payload.issuer is not None and payload.issuer != issuer.did:
        return ChallengePayload(
            valid=False, error=["Challenge was not issued by the expected issuer"]
        )

    record = {"challenge": message}
    if payload.signer is not None:
        signer_errors = await acheck_challenge(
            payload.signer.challenge,
            payload.signer.address,
            payload.type,
            payload.signer.signature,
            issuer,
        )
        if signer_errors:
            return ChallengePayload(
                valid=False,
                error=[f"Invalid signer: {error}" for error in signer_errors],
            )
        record["signer"] = payload.signer.address.lower()
        record["signerChallenge"] = payload.signer.challenge["credentialSubject"][
            "challenge"
        ]

    return ChallengePayload(valid=True, record=record)


async def averify_provider(
    provider_type: str,
    payload: RequestPayload,
    context: ProviderContext,
    registry: ProviderRegistry,
) -> Tuple[VerifiedPayload, int]:
    """
    Run a single provider. Returns the provider result together with the code
    to report if it is not valid. Only ContextCorruption escapes.
    """
    if provider_type not in registry:
        return (
            VerifiedPayload(valid=False, error=[f"Unsupported provider: {provider_type}"]),
            CODE_BAD_REQUEST,
        )

    try:
        verified = await registry.get(provider_type).averify(payload, context)
    except ContextCorruption:
        log.error(
            "Provider context corrupted while verifying provider='%s'",
            provider_type,
            exc_info=True,
        )
        raise
    except Exception:
        log.error(
            "Provider '%s' failed while verifying address='%s'",
            provider_type,
            payload.address,
            exc_info=True,
        )
        return (
            VerifiedPayload(valid=False, error=[f"Unable to verify {provider_type}"]),
            CODE_INTERNAL_ERROR,
        )

    return verified, CODE_FORBIDDEN


async def aissue_hashed_credential(
    issuer: DIDKitIssuer, address: str, record: dict, expires_in_seconds: int
) -> dict:
    now = get_utc_time()
    return await issuer.aissue_credential(
        {
            "@context": ["https://www.w3.org/2018/credentials/v1"],
            "type": ["VerifiableCredential"],
            "issuanceDate": format_date(now),
            "expirationDate": format_date(now + timedelta(seconds=expires_in_seconds)),
            "credentialSubject": {
                "@context": [
                    {
                        "hash": "https://schema.org/Text",
                        "provider": "https://schema.org/Text",
                    }
                ],
                "id": get_did(address),
                "provider": record["type"],
                "hash": hash_record(record),
            },
        }
    )


async def averify_type(
    provider_type: str,
    payload: RequestPayload,
    context: ProviderContext,
    registry: ProviderRegistry,
    issuer: DIDKitIssuer,
) -> CredentialResponseBody:
    verified, failure_code = await averify_provider(
        provider_type, payload, context, registry
    )

    if not verified.valid:
        log.info(
            "Provider '%s' rejected address='%s'", provider_type, payload.address
        )
        error = (
            ", ".join(verified.error)
            if verified.error
            else f"Unable to verify proofs for {provider_type}"
        )
        return CredentialResponseBody(error=error, code=failure_code)

    record = build_proof_record(provider_type, payload.version, verified.record)
    expires_in_seconds = (
        verified.expires_in_seconds or settings.CREDENTIAL_EXPIRES_AFTER_SECONDS
    )

    credential = await aissue_hashed_credential(
        issuer, payload.address, record, expires_in_seconds
    )
    return CredentialResponseBody(credential=credential, record=record)


async def averify_credentials(
    challenge: dict,
    payload: RequestPayload,
    registry: Optional[ProviderRegistry] = None,
    issuer: Optional[DIDKitIssuer] = None,
) -> List[CredentialResponseBody]:
    """
    Verify every type requested in `payload` against the answered `challenge`
    and issue a credential for each one that passes. The result has one entry
    per requested type, in request order.
    """
    registry = registry if registry is not None else default_registry
    issuer = issuer or get_issuer()
    types = payload.requested_types()

    challenge_result = await averify_challenge(challenge, payload, issuer)
    if not challenge_result.valid:
        error = ", ".join(challenge_result.error)
        return [CredentialResponseBody(error=error, code=CODE_UNAUTHORIZED) for _ in types]

    provider = get_challenge_provider(payload.type)
    used = await IssuedChallenge.ause_challenge(
        challenge_result.record["challenge"], provider, payload.address
    )
    if used and payload.signer is not None:
        used = await IssuedChallenge.ause_challenge(
            challenge_result.record["signerChallenge"], provider, payload.signer.address
        )
    if not used:
        return [
            CredentialResponseBody(
                error="Challenge is unknown or has already been used",
                code=CODE_UNAUTHORIZED,
            )
            for _ in types
        ]

    # Lives for this call only, providers verified below share it
    context = ProviderContext()
    if payload.signer is not None:
        context.set(SIGNER_CONTEXT_KEY, challenge_result.record["signer"])

    # Providers run one after the other and share the context
    return [
        await averify_type(provider_type, payload, context, registry, issuer)
        for provider_type in types
    ]


async def averify_credential(
    challenge: dict,
    payload: RequestPayload,
    registry: Optional[ProviderRegistry] = None,
    issuer: Optional[DIDKitIssuer] = None,
) -> CredentialResponseBody:
    single = payload.model_copy(update={"types": [payload.type]})
    return (await averify_credentials(challenge, single, registry, issuer))[0]


async def acheck_types(
    payload: RequestPayload, registry: Optional[ProviderRegistry] = None
) -> List[CheckResponseBody]:
    """
    Run the providers for every requested type without a challenge and
    without issuing anything, to tell the client which stamps it could claim.
    """
    registry = registry if registry is not None else default_registry
    context = ProviderContext()

    results = []
    for provider_type in payload.requested_types():
        verified, failure_code = await averify_provider(
            provider_type, payload, context, registry
        )
        if verified.valid:
            results.append(CheckResponseBody(valid=True, type=provider_type))
        else:
            results.append(
                CheckResponseBody(
                    valid=False,
                    type=provider_type,
                    error=", ".join(verified.error)
                    or f"Unable to verify proofs for {provider_type}",
                    code=failure_code,
                )
            )
    return results
