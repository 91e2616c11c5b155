import asyncio
from decimal import ROUND_CEILING, Decimal, InvalidOperation
from typing import Optional

import aiohttp
from django.conf import settings

import api_logging as logging

from .exceptions import FeeUnavailableException

log = logging.getLogger(__name__)

WEI_PER_ETH = Decimal(10) ** 18


def compute_fee(eth_price_usd: Decimal, fee_usd: Optional[Decimal] = None) -> int:
    """Fee in wei for `fee_usd`, rounded up to the next wei"""
    if fee_usd is None:
        fee_usd = settings.EAS_FEE_USD
    if not eth_price_usd.is_finite() or eth_price_usd <= 0:
        raise FeeUnavailableException(detail="Invalid ETH price.")

    return int(
        (Decimal(fee_usd) * WEI_PER_ETH / eth_price_usd).to_integral_value(
            rounding=ROUND_CEILING
        )
    )


async def aget_eth_price_usd(access_token: str, url: Optional[str] = None) -> Decimal:
    url = url or settings.EAS_FEE_PARAMETERS_URL
    headers = {"Authorization": f"Bearer {access_token}"}
    try:
        async with aiohttp.ClientSession(
            timeout=aiohttp.ClientTimeout(total=10)
        ) as session:
            async with session.get(url, headers=headers) as response:
                if response.status != 200:
                    log.error(
                        "Fee parameters request failed with status %s", response.status
                    )
                    raise FeeUnavailableException()
                body = await response.json(content_type=None)
    except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
        log.error("Unable to fetch fee parameters", exc_info=True)
        raise FeeUnavailableException() from exc

    try:
        return Decimal(str(body["ethPriceUsd"]))
    except (KeyError, TypeError, InvalidOperation) as exc:
        log.error("Fee parameters response is missing a valid ethPriceUsd")
        raise FeeUnavailableException() from exc


async def aget_fee(access_token: str) -> int:
    return compute_fee(await aget_eth_price_usd(access_token))
