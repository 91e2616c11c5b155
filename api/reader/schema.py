"""Passport load schema"""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from ninja import Schema
from pydantic import model_validator
from typing_extensions import Self


class Stamp(Schema):
    # Only stamps loaded from the stream storage have a stream id
    streamId: Optional[str] = None
    provider: str
    credential: dict


class Passport(Schema):
    issuanceDate: Optional[datetime] = None
    expiryDate: Optional[datetime] = None
    stamps: List[Stamp] = []


class PassportLoadStatus(str, Enum):
    SUCCESS = "Success"
    DOES_NOT_EXIST = "DoesNotExist"
    EXCEPTION_RAISED = "ExceptionRaised"
    STAMP_CACAO_ERROR = "StampCacaoError"
    PASSPORT_CACAO_ERROR = "PassportCacaoError"
    STAMP_SUBJECT_MISMATCH = "StampSubjectMismatch"


class PassportLoadErrorDetails(Schema):
    # Stamps with an invalid CACAO
    stampStreamIds: List[str] = []
    # Stamps issued to another DID than the passport owner
    mismatchedStreamIds: List[str] = []


class PassportLoadResponse(Schema):
    passport: Optional[Passport] = None
    status: PassportLoadStatus
    errorDetails: Optional[PassportLoadErrorDetails] = None

    @model_validator(mode="after")
    def check_passport_matches_status(self) -> Self:
        # Only a full or a partial load carries a passport
        carries_passport = self.status in (
            PassportLoadStatus.SUCCESS,
            PassportLoadStatus.STAMP_CACAO_ERROR,
            PassportLoadStatus.STAMP_SUBJECT_MISMATCH,
        )
        if carries_passport and self.passport is None:
            raise ValueError(f"A passport is required for status {self.status.value}")
        if not carries_passport and self.passport is not None:
            raise ValueError(f"No passport allowed for status {self.status.value}")
        return self
