"""
Boundary to the stream storage that persists passports and stamps.

The storage is an external collaborator: the aggregator only relies on the
PassportStorage interface and on the exceptions below. CeramicStorage is the
adapter for a Ceramic node's HTTP API.
"""

import asyncio
from hashlib import sha256
from typing import Dict, List, Optional

import aiohttp
import dag_cbor
from django.conf import settings
from multiformats import CID, multibase, varint

import api_logging as logging

log = logging.getLogger(__name__)


class StorageException(Exception):
    pass


class StampCacaoException(StorageException):
    """The authorization proof (CACAO) of a single stamp stream is malformed or expired"""

    def __init__(self, stream_id: str):
        self.stream_id = stream_id
        super().__init__(f"Invalid CACAO for stamp stream {stream_id}")


class PassportCacaoException(StorageException):
    """The authorization proof (CACAO) of the passport record itself is malformed or expired"""


class PassportStorage:
    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        return None

    async def aget_passport(self, did: str) -> Optional[Dict]:
        """
        Return the passport record of `did` as
        `{"issuanceDate", "expiryDate", "stamps": [{"provider", "streamId"}]}`,
        or None if the DID has no passport.
        """
        raise NotImplementedError

    async def aget_stamp(self, stream_id: str) -> Dict:
        """Return the credential stored in the stamp stream `stream_id`"""
        raise NotImplementedError


# Ceramic definition id for Gitcoin Passport
CERAMIC_GITCOIN_PASSPORT_STREAM_ID = (
    "kjzl6cwe1jw148h1e14jb5fkf55xmqhmyorp29r9cq356c7ou74ulowf8czjlzs"
)

STREAMID_CODEC = 206
TILE_STREAM_TYPE = 0
CERAMIC_URI_PREFIX = "ceramic://"


def get_idx_index_stream_id(did: str) -> str:
    """
    The IDX index of a DID lives in a deterministic tile (no `unique` in the
    genesis header), so its stream id can be computed from the DID alone.
    """
    genesis = {"header": {"controllers": [did], "family": "IDX"}}
    digest = sha256(dag_cbor.encode(genesis)).digest()
    genesis_cid = CID("base32", 1, "dag-cbor", ("sha2-256", digest))

    stream_id = varint.encode(STREAMID_CODEC) + varint.encode(TILE_STREAM_TYPE)
    return multibase.encode(stream_id + bytes(genesis_cid), "base36")


def strip_ceramic_uri(uri: str) -> str:
    return uri[len(CERAMIC_URI_PREFIX) :] if uri.startswith(CERAMIC_URI_PREFIX) else uri


def is_cacao_error(message: str) -> bool:
    return "cacao" in message.lower()


class CeramicStorage(PassportStorage):
    def __init__(self, url: Optional[str] = None, timeout: Optional[int] = None):
        self.url = (url or settings.CERAMIC_URL).rstrip("/")
        self.timeout = aiohttp.ClientTimeout(
            total=timeout if timeout is not None else settings.CERAMIC_TIMEOUT_SECONDS
        )
        self.session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self):
        self.session = aiohttp.ClientSession(timeout=self.timeout)
        return self

    async def __aexit__(self, *exc_info):
        await self.session.close()
        self.session = None

    async def aload_stream(self, stream_id: str) -> Optional[Dict]:
        """
        Return the current content of `stream_id`, None if the node does not
        know the stream. Errors mentioning the CACAO are raised as
        StampCacaoException, anything else as StorageException.
        """
        url = f"{self.url}/api/v0/streams/{stream_id}"
        try:
            async with self.session.get(url) as response:
                if response.status == 404:
                    return None
                body = await response.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            raise StorageException(f"Unable to load stream {stream_id}") from exc

        if response.status != 200:
            message = str((body or {}).get("error", ""))
            if is_cacao_error(message):
                raise StampCacaoException(stream_id)
            raise StorageException(
                f"Loading stream {stream_id} failed with status {response.status}"
            )

        return ((body or {}).get("state") or {}).get("content")

    async def aget_passport(self, did: str) -> Optional[Dict]:
        try:
            index = await self.aload_stream(get_idx_index_stream_id(did))
            if not index or CERAMIC_GITCOIN_PASSPORT_STREAM_ID not in index:
                return None

            record = await self.aload_stream(
                strip_ceramic_uri(index[CERAMIC_GITCOIN_PASSPORT_STREAM_ID])
            )
        except StampCacaoException as exc:
            raise PassportCacaoException(str(exc)) from exc

        if record is None:
            return None

        stamps: List[Dict] = [
            {
                "provider": stamp.get("provider"),
                "streamId": strip_ceramic_uri(stamp.get("credential", "")),
            }
            for stamp in record.get("stamps", [])
        ]
        return {
            "issuanceDate": record.get("issuanceDate"),
            "expiryDate": record.get("expiryDate"),
            "stamps": stamps,
        }

    async def aget_stamp(self, stream_id: str) -> Dict:
        credential = await self.aload_stream(stream_id)
        if credential is None:
            raise StorageException(f"Stamp stream {stream_id} does not exist")
        return credential
