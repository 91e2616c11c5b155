"""
EIP-712 signature over the attestation payload. The verifier contract rebuilds
the same typed data on-chain and only forwards the attestations to EAS when
the signature recovers to our attester address.
"""

from typing import Dict, List, Optional

from django.conf import settings
from eth_account import Account
from web3 import Web3

from .schema import EasSignature, PassportAttestation

EIP712_DOMAIN_VERSION = "1"

ATTESTER_TYPES: Dict[str, List[Dict[str, str]]] = {
    "AttestationRequestData": [
        {"name": "recipient", "type": "address"},
        {"name": "expirationTime", "type": "uint64"},
        {"name": "revocable", "type": "bool"},
        {"name": "refUID", "type": "bytes32"},
        {"name": "data", "type": "bytes"},
        {"name": "value", "type": "uint256"},
    ],
    "MultiAttestationRequest": [
        {"name": "schema", "type": "bytes32"},
        {"name": "data", "type": "AttestationRequestData[]"},
    ],
    "PassportAttestationRequest": [
        {"name": "multiAttestationRequest", "type": "MultiAttestationRequest[]"},
        {"name": "nonce", "type": "uint256"},
        {"name": "fee", "type": "uint256"},
    ],
}


def get_domain() -> dict:
    return {
        "name": settings.EAS_VERIFIER_NAME,
        "version": EIP712_DOMAIN_VERSION,
        "chainId": settings.EAS_CHAIN_ID,
        "verifyingContract": Web3.to_checksum_address(settings.EAS_VERIFIER_ADDRESS),
    }


def to_typed_message(attestation: PassportAttestation) -> dict:
    return {
        "multiAttestationRequest": [
            {
                "schema": request.schema_uid,
                "data": [
                    {
                        "recipient": Web3.to_checksum_address(data.recipient),
                        "expirationTime": data.expirationTime,
                        "revocable": data.revocable,
                        "refUID": data.refUID,
                        "data": data.data,
                        "value": data.value,
                    }
                    for data in request.data
                ],
            }
            for request in attestation.multiAttestationRequest
        ],
        "nonce": attestation.nonce,
        "fee": attestation.fee,
    }


def to_bytes32_hex(value: int) -> str:
    return "0x" + value.to_bytes(32, "big").hex()


def sign_attestation(
    attestation: PassportAttestation, private_key: Optional[str] = None
) -> EasSignature:
    signed = Account.sign_typed_data(
        private_key or settings.EAS_ATTESTATION_SIGNER_PRIVATE_KEY,
        domain_data=get_domain(),
        message_types=ATTESTER_TYPES,
        message_data=to_typed_message(attestation),
    )
    return EasSignature(v=signed.v, r=to_bytes32_hex(signed.r), s=to_bytes32_hex(signed.s))
