import asyncio
import base64
import binascii
from typing import List, Optional, Tuple

from credentials.issuer import DIDKitIssuer, get_issuer
from credentials.record import HASH_VERSION
from credentials.utils import get_address_from_did, get_utc_time, parse_date
from django.conf import settings
from eth_abi import encode
from eth_utils import is_address
from web3 import Web3

import api_logging as logging

from .exceptions import AttestationError, NoValidCredentialsException
from .fees import aget_fee
from .nonce import NonceSource, arelease_nonce, areserve_nonce
from .schema import (
    AttestationRequestData,
    EasPayload,
    EasRequestBody,
    MultiAttestationRequest,
    PassportAttestation,
)
from .signing import sign_attestation
from .stamp_bits import (
    PROVIDER_MAP_VERSION,
    encode_providers,
    get_stamp_bit,
    has_stamp_bit,
)

log = logging.getLogger(__name__)


def decode_stamp_hash(stamp_hash: str) -> bytes:
    """The raw 32 byte digest of a `v0.0.0:<base64>` credential hash"""
    version, _, encoded = str(stamp_hash).partition(":")
    if version != HASH_VERSION or not encoded:
        raise ValueError("Unsupported hash version")
    digest = base64.b64decode(encoded, validate=True)
    if len(digest) != 32:
        raise ValueError("Hash is not 32 bytes long")
    return digest


def to_unix_seconds(value: str) -> int:
    return int(parse_date(value).timestamp())


async def avalidate_credential(
    credential: dict, recipient: str, issuer: DIDKitIssuer
) -> List[str]:
    """Return the reasons `credential` can not be attested, empty if it can"""
    errors = []
    credential_subject = credential.get("credentialSubject") or {}

    if not credential_subject:
        errors.append("Missing attribute: credentialSubject")

    if not credential_subject.get("provider"):
        errors.append("Missing attribute: provider")

    stamp_did = str(credential_subject.get("id", "")).lower()
    if not stamp_did:
        errors.append("Missing attribute: id")
    elif get_address_from_did(stamp_did) != recipient.lower():
        errors.append("Did mismatch")

    try:
        decode_stamp_hash(credential_subject.get("hash", ""))
    except (ValueError, binascii.Error):
        errors.append("Missing or invalid attribute: hash")

    try:
        if parse_date(credential["expirationDate"]) <= get_utc_time():
            errors.append("Credential has expired")
    except (KeyError, TypeError, ValueError):
        errors.append("Missing or invalid attribute: expirationDate")

    try:
        parse_date(credential["issuanceDate"])
    except (KeyError, TypeError, ValueError):
        errors.append("Missing or invalid attribute: issuanceDate")

    if credential.get("issuer") != issuer.did:
        errors.append("Invalid issuer")

    if errors:
        return errors

    verification_errors = await issuer.averify_credential(credential)
    if verification_errors:
        errors.append(f"Stamp validation failed: {verification_errors}")
    return errors


async def apartition_credentials(
    credentials: List[dict], recipient: str, issuer: DIDKitIssuer
) -> Tuple[List[dict], List[dict]]:
    results = await asyncio.gather(
        *[
            avalidate_credential(credential, recipient, issuer)
            for credential in credentials
        ]
    )

    valid, invalid = [], []
    for credential, errors in zip(credentials, results):
        if errors:
            log.info(
                "Credential for provider='%s' can not be attested: %s",
                (credential.get("credentialSubject") or {}).get("provider"),
                errors,
            )
            invalid.append(credential)
        else:
            valid.append(credential)
    return valid, invalid


def get_recipient(body: EasRequestBody) -> str:
    recipient = body.recipient
    if not recipient and body.credentials:
        credential_subject = body.credentials[0].get("credentialSubject") or {}
        recipient = get_address_from_did(str(credential_subject.get("id", "")))

    if not recipient or not is_address(recipient):
        raise AttestationError(detail="Invalid recipient.")
    return Web3.to_checksum_address(recipient)


def build_stamp_attestations(
    credentials: List[dict], recipient: str
) -> List[MultiAttestationRequest]:
    data = [
        AttestationRequestData(
            recipient=recipient,
            expirationTime=to_unix_seconds(credential["expirationDate"]),
            revocable=True,
            data="0x"
            + encode(
                ["string", "bytes32"],
                [
                    credential["credentialSubject"]["provider"],
                    decode_stamp_hash(credential["credentialSubject"]["hash"]),
                ],
            ).hex(),
        )
        for credential in credentials
    ]

    chunk_size = settings.EAS_MAX_ATTESTATIONS_PER_REQUEST
    return [
        MultiAttestationRequest(
            schema_uid=settings.EAS_STAMP_SCHEMA_UID, data=data[i : i + chunk_size]
        )
        for i in range(0, len(data), chunk_size)
    ]


def build_passport_attestation(
    credentials: List[dict], recipient: str
) -> Optional[MultiAttestationRequest]:
    """
    A single attestation for the whole passport: the providers as a bitmap
    plus hashes and dates ordered by bit position. Providers without a stamp
    bit are left out of it.
    """
    by_provider = {}
    for credential in credentials:
        provider = credential["credentialSubject"]["provider"]
        if not has_stamp_bit(provider):
            log.warning("No stamp bit for provider='%s'", provider)
            continue
        by_provider.setdefault(provider, credential)

    if not by_provider:
        return None

    ordered = sorted(
        by_provider.items(),
        key=lambda item: (get_stamp_bit(item[0]).index, get_stamp_bit(item[0]).bit),
    )

    encoded = encode(
        ["uint256[]", "bytes32[]", "uint64[]", "uint64[]", "uint16"],
        [
            encode_providers(provider for provider, _ in ordered),
            [
                decode_stamp_hash(credential["credentialSubject"]["hash"])
                for _, credential in ordered
            ],
            [to_unix_seconds(credential["issuanceDate"]) for _, credential in ordered],
            [
                to_unix_seconds(credential["expirationDate"])
                for _, credential in ordered
            ],
            PROVIDER_MAP_VERSION,
        ],
    )

    return MultiAttestationRequest(
        schema_uid=settings.EAS_PASSPORT_SCHEMA_UID,
        data=[
            AttestationRequestData(
                recipient=recipient, revocable=True, data="0x" + encoded.hex()
            )
        ],
    )


async def aprepare_attestation(
    body: EasRequestBody,
    issuer: Optional[DIDKitIssuer] = None,
    nonce_source: Optional[NonceSource] = None,
) -> EasPayload:
    if issuer is None:
        issuer = get_issuer()

    recipient = get_recipient(body)

    valid, invalid = await apartition_credentials(body.credentials, recipient, issuer)
    if not valid:
        raise NoValidCredentialsException()

    requests = build_stamp_attestations(valid, recipient)
    if settings.FF_PASSPORT_BITMAP_ATTESTATION == "on":
        passport_request = build_passport_attestation(valid, recipient)
        if passport_request is not None:
            requests.append(passport_request)

    fee = await aget_fee(body.dbAccessToken)
    nonce = await areserve_nonce(recipient, body.nonce, nonce_source)

    attestation = PassportAttestation(
        multiAttestationRequest=requests, nonce=nonce, fee=fee
    )
    try:
        signature = sign_attestation(attestation)
    except Exception as exc:
        log.error("Unable to sign attestation for recipient='%s'", recipient, exc_info=True)
        # Nothing was signed for the nonce, the client can retry with it
        await arelease_nonce(recipient, nonce)
        raise AttestationError(detail="Unable to sign attestation.") from exc

    log.info(
        "Prepared attestation for recipient='%s' with %s stamps, %s invalid",
        recipient,
        len(valid),
        len(invalid),
    )
    return EasPayload(
        passport=attestation, signature=signature, invalidCredentials=invalid
    )
