from __future__ import annotations

from datetime import datetime, timezone
from typing import Type

from django.db import models

import api_logging as logging

log = logging.getLogger(__name__)

tz = timezone.utc


class EthAddressField(models.CharField):
    def __init__(self, *args, **kwargs):
        if "max_length" not in kwargs:
            kwargs["max_length"] = 42
        super().__init__(*args, **kwargs)

    def get_prep_value(self, value):
        return str(value).lower()


class IssuedChallenge(models.Model):
    """
    Every challenge we hand out. A challenge can be answered exactly once for
    the (provider, address) pair it was issued to, and only until it expires.
    """

    challenge = models.CharField(
        max_length=512, blank=False, null=False, unique=True, db_index=True
    )
    provider = models.CharField(max_length=256, blank=False, null=False)
    address = EthAddressField(blank=False, null=False, db_index=True)
    created_on = models.DateTimeField(auto_now_add=True)
    expires_on = models.DateTimeField(null=False, blank=False)
    was_used = models.BooleanField(default=False)

    def __str__(self):
        return f"{self.provider} - {self.address} - used={self.was_used} - expires_on={self.expires_on}"

    @classmethod
    async def ause_challenge(
        cls: Type[IssuedChallenge], challenge: str, provider: str, address: str
    ) -> bool:
        """
        Mark the challenge as used. The update only matches an unused and
        unexpired row, so of two concurrent requests answering the same
        challenge only one gets `True`.
        """
        updated = await cls.objects.filter(
            challenge=challenge,
            provider=provider,
            address=address,
            expires_on__gt=datetime.now(tz),
            was_used=False,
        ).aupdate(was_used=True)

        if updated != 1:
            log.debug(
                "Challenge for provider='%s' address='%s' is unknown, used or expired",
                provider,
                address,
            )
        return updated == 1
