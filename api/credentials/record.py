"""
Proof records are the PII-bearing fields a provider verified (username, email,
...). They are never stored as-is: the record is canonicalised, prefixed with
a process-wide secret and hashed. The resulting value is what ends up in the
`hash` field of the credential subject.
"""

import base64
import hashlib
import json
from typing import Dict, List, Optional

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured

HASH_VERSION = "v0.0.0"

ProofRecord = Dict[str, str]


def build_proof_record(
    provider: str, version: str, fields: Optional[Dict[str, str]] = None
) -> ProofRecord:
    record = {
        key: str(value)
        for key, value in (fields or {}).items()
        if value is not None and value != ""
    }
    # type and version always come from the request, never from the provider
    record.update(type=provider, version=version)
    return record


def canonicalize_record(record: ProofRecord) -> List[List[str]]:
    return [[key, record[key]] for key in sorted(record.keys())]


def hash_record(record: ProofRecord, secret: Optional[str] = None) -> str:
    if secret is None:
        secret = get_record_secret()

    serialized = json.dumps(
        canonicalize_record(record), separators=(",", ":"), ensure_ascii=False
    )

    digest = hashlib.sha256()
    digest.update(secret.encode("utf-8"))
    digest.update(serialized.encode("utf-8"))

    return f"{HASH_VERSION}:{base64.b64encode(digest.digest()).decode('utf-8')}"


def get_record_secret() -> str:
    global LOADED_RECORD_SECRET
    if LOADED_RECORD_SECRET is None:
        secret = settings.IAM_RECORD_SECRET
        if not secret:
            raise ImproperlyConfigured(
                "IAM_RECORD_SECRET must be set to hash proof records"
            )
        LOADED_RECORD_SECRET = secret
    return LOADED_RECORD_SECRET


# Read from settings on first use, never changed afterwards
LOADED_RECORD_SECRET = None
