# Loads a passport and its stamps from the stream storage
import asyncio
from typing import Iterable, List, Optional

from asgiref.sync import async_to_sync

import api_logging as logging

from .schema import (
    Passport,
    PassportLoadErrorDetails,
    PassportLoadResponse,
    PassportLoadStatus,
    Stamp,
)
from .storage import (
    CeramicStorage,
    PassportCacaoException,
    PassportStorage,
    StampCacaoException,
)

log = logging.getLogger(__name__)


async def aload_passport(
    did: str,
    stream_ids: Optional[Iterable[str]] = None,
    storage: Optional[PassportStorage] = None,
) -> PassportLoadResponse:
    """
    Load the passport of `did`. Without `stream_ids` every stamp listed in the
    passport record is loaded, otherwise only the given stamp streams.

    Stamps whose authorization proof is broken are left out and reported in
    `errorDetails.stampStreamIds` (status StampCacaoError), the rest of the
    passport is still returned. Stamps issued to another DID are left out the
    same way and reported in `errorDetails.mismatchedStreamIds` (status
    StampSubjectMismatch unless a CACAO failure was reported too).
    """
    if storage is None:
        storage = CeramicStorage()

    async with storage:
        return await _aload_passport(did.lower(), stream_ids, storage)


async def _aload_passport(
    did: str, stream_ids: Optional[Iterable[str]], storage: PassportStorage
) -> PassportLoadResponse:
    try:
        passport_record = await storage.aget_passport(did)
    except PassportCacaoException:
        log.warning("Invalid CACAO on the passport record of did='%s'", did)
        return PassportLoadResponse(status=PassportLoadStatus.PASSPORT_CACAO_ERROR)
    except Exception:
        log.error("Error loading the passport record of did='%s'", did, exc_info=True)
        return PassportLoadResponse(status=PassportLoadStatus.EXCEPTION_RAISED)

    if passport_record is None:
        return PassportLoadResponse(status=PassportLoadStatus.DOES_NOT_EXIST)

    providers_by_stream_id = {
        stamp["streamId"]: stamp.get("provider")
        for stamp in passport_record.get("stamps", [])
    }
    requested = (
        list(stream_ids)
        if stream_ids is not None
        else list(providers_by_stream_id.keys())
    )

    # The reads run concurrently, the outcomes are only collected once all of
    # them completed
    results = await asyncio.gather(
        *[storage.aget_stamp(stream_id) for stream_id in requested],
        return_exceptions=True,
    )

    stamps: List[Stamp] = []
    failed_stream_ids: List[str] = []
    mismatched_stream_ids: List[str] = []
    for stream_id, result in zip(requested, results):
        if isinstance(result, StampCacaoException):
            failed_stream_ids.append(stream_id)
            continue

        if isinstance(result, BaseException):
            log.error(
                "Error loading stamp stream_id='%s' for did='%s'",
                stream_id,
                did,
                exc_info=result,
            )
            return PassportLoadResponse(status=PassportLoadStatus.EXCEPTION_RAISED)

        credential_subject = result.get("credentialSubject") or {}
        if str(credential_subject.get("id", "")).lower() != did:
            log.warning(
                "Excluding stamp stream_id='%s', it does not belong to did='%s'",
                stream_id,
                did,
            )
            mismatched_stream_ids.append(stream_id)
            continue

        stamps.append(
            Stamp(
                streamId=stream_id,
                provider=providers_by_stream_id.get(stream_id)
                or credential_subject.get("provider", ""),
                credential=result,
            )
        )

    passport = Passport(
        issuanceDate=passport_record.get("issuanceDate"),
        expiryDate=passport_record.get("expiryDate"),
        stamps=stamps,
    )

    if not failed_stream_ids and not mismatched_stream_ids:
        return PassportLoadResponse(passport=passport, status=PassportLoadStatus.SUCCESS)

    log.info(
        "Loaded passport for did='%s' without %s stamps with an invalid CACAO and %s stamps of another did",
        did,
        len(failed_stream_ids),
        len(mismatched_stream_ids),
    )
    # An invalid CACAO takes precedence, both lists are always reported
    return PassportLoadResponse(
        passport=passport,
        status=(
            PassportLoadStatus.STAMP_CACAO_ERROR
            if failed_stream_ids
            else PassportLoadStatus.STAMP_SUBJECT_MISMATCH
        ),
        errorDetails=PassportLoadErrorDetails(
            stampStreamIds=failed_stream_ids,
            mismatchedStreamIds=mismatched_stream_ids,
        ),
    )


def load_passport(
    did: str,
    stream_ids: Optional[Iterable[str]] = None,
    storage: Optional[PassportStorage] = None,
) -> PassportLoadResponse:
    return async_to_sync(aload_passport)(did, stream_ids, storage)
