"""
Nonces are owned by the verifier contract: every recipient has a counter that
is bumped each time an attestation payload for it is submitted. A payload is
only signed for the nonce the chain currently expects, and only once.
"""

from typing import Optional

from asgiref.sync import sync_to_async
from django.conf import settings
from web3 import Web3

import api_logging as logging

from .exceptions import InvalidNonceException
from .models import NonceReservation

log = logging.getLogger(__name__)

VERIFIER_NONCE_ABI = [
    {
        "inputs": [{"internalType": "address", "name": "", "type": "address"}],
        "name": "recipientNonces",
        "outputs": [{"internalType": "uint256", "name": "", "type": "uint256"}],
        "stateMutability": "view",
        "type": "function",
    }
]


class NonceSource:
    async def aget_nonce(self, recipient: str) -> int:
        raise NotImplementedError


class ChainNonceSource(NonceSource):
    def __init__(
        self, rpc_url: Optional[str] = None, verifier_address: Optional[str] = None
    ):
        self.w3 = Web3(Web3.HTTPProvider(rpc_url or settings.EAS_RPC_URL))
        self.contract = self.w3.eth.contract(
            address=Web3.to_checksum_address(
                verifier_address or settings.EAS_VERIFIER_ADDRESS
            ),
            abi=VERIFIER_NONCE_ABI,
        )

    def get_nonce(self, recipient: str) -> int:
        return self.contract.functions.recipientNonces(
            Web3.to_checksum_address(recipient)
        ).call()

    async def aget_nonce(self, recipient: str) -> int:
        return await sync_to_async(self.get_nonce, thread_sensitive=False)(recipient)


async def areserve_nonce(
    recipient: str, nonce: int, nonce_source: Optional[NonceSource] = None
) -> int:
    """
    Check `nonce` against the chain and reserve it for `recipient`. Raises
    InvalidNonceException when the chain expects another nonce or when a
    payload was already signed for this nonce recently.
    """
    if nonce_source is None:
        nonce_source = ChainNonceSource()

    try:
        expected = await nonce_source.aget_nonce(recipient)
    except Exception as exc:
        log.error("Unable to read the nonce of recipient='%s'", recipient, exc_info=True)
        raise InvalidNonceException(detail="Unable to verify nonce.") from exc

    if expected != nonce:
        log.info(
            "Nonce mismatch for recipient='%s': declared=%s expected=%s",
            recipient,
            nonce,
            expected,
        )
        raise InvalidNonceException(detail="Nonce does not match the chain state.")

    if not await NonceReservation.areserve(recipient, nonce):
        raise InvalidNonceException(detail="Nonce is already reserved.")

    return nonce


async def arelease_nonce(recipient: str, nonce: int) -> None:
    await NonceReservation.arelease(recipient, nonce)
    log.info("Released nonce %s of recipient='%s'", nonce, recipient)
