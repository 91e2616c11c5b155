from __future__ import annotations

from datetime import datetime, timedelta
from typing import Optional, Type

from asgiref.sync import sync_to_async
from credentials.models import EthAddressField, tz
from django.conf import settings
from django.db import models, transaction

import api_logging as logging

log = logging.getLogger(__name__)


class NonceReservation(models.Model):
    """
    The last nonce an attestation payload was signed for, per recipient. The
    verifier contract accepts a nonce only once, so while a reservation is live
    no second payload is signed for the same nonce.
    """

    address = EthAddressField(blank=False, null=False, unique=True, db_index=True)
    # uint256
    nonce = models.DecimalField(max_digits=78, decimal_places=0)
    reserved_until = models.DateTimeField(null=False, blank=False)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.address} - nonce={self.nonce} - reserved_until={self.reserved_until}"

    @classmethod
    def reserve(
        cls: Type[NonceReservation],
        address: str,
        nonce: int,
        ttl_seconds: Optional[int] = None,
    ) -> bool:
        """
        Reserve `nonce` for `address`. Returns False if the same nonce is
        already reserved and the reservation has not expired.
        """
        if ttl_seconds is None:
            ttl_seconds = settings.EAS_NONCE_RESERVATION_TTL_SECONDS

        now = datetime.now(tz)
        reserved_until = now + timedelta(seconds=ttl_seconds)

        with transaction.atomic():
            reservation, created = cls.objects.select_for_update().get_or_create(
                address=address,
                defaults={"nonce": nonce, "reserved_until": reserved_until},
            )
            if created:
                return True

            if int(reservation.nonce) == nonce and reservation.reserved_until > now:
                log.debug(
                    "Nonce %s is already reserved for address='%s'", nonce, address
                )
                return False

            reservation.nonce = nonce
            reservation.reserved_until = reserved_until
            reservation.save()
            return True

    @classmethod
    async def areserve(
        cls: Type[NonceReservation],
        address: str,
        nonce: int,
        ttl_seconds: Optional[int] = None,
    ) -> bool:
        return await sync_to_async(cls.reserve)(address, nonce, ttl_seconds)

    @classmethod
    async def arelease(cls: Type[NonceReservation], address: str, nonce: int) -> None:
        """Drop the reservation of `nonce`, no payload was signed for it"""
        await cls.objects.filter(address=address, nonce=nonce).adelete()
