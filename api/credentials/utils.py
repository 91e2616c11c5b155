from datetime import datetime, timezone

from django.conf import settings


def get_utc_time() -> datetime:
    return datetime.now(timezone.utc)


def get_did(address: str, network: str = None) -> str:
    # returns the did associated with the address on the given network
    network = network if network is not None else settings.IAM_DID_NETWORK
    return (f"did:pkh:eip155:{network}:{address}").lower()


def get_address_from_did(did: str) -> str:
    return did.split(":")[-1]


def format_date(value: datetime) -> str:
    """ISO 8601 in UTC with millisecond precision, e.g. 2023-01-01T00:00:00.000Z"""
    return (
        value.astimezone(timezone.utc)
        .isoformat(timespec="milliseconds")
        .replace("+00:00", "Z")
    )


def parse_date(value: str) -> datetime:
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
