"""
Thin wrapper around DIDKit, the backend that holds the IAM key and signs the
challenges and credentials we issue.
"""

import json
from typing import List, Optional

import didkit
from django.conf import settings

import api_logging as logging

from .exceptions import IssuanceError

log = logging.getLogger(__name__)

PROOF_PURPOSE = "assertionMethod"


class DIDKitIssuer:
    def __init__(self, jwk: Optional[str] = None):
        self.jwk = jwk if jwk is not None else settings.IAM_JWK

    @property
    def did(self) -> str:
        if not self.jwk:
            raise IssuanceError(detail="No issuer key configured.")
        try:
            return didkit.key_to_did("key", self.jwk)
        except Exception as exc:
            log.error("Unable to derive issuer DID", exc_info=True)
            raise IssuanceError() from exc

    async def aissue_credential(self, credential: dict) -> dict:
        """
        Sign `credential` (which must not carry a proof yet) and return the
        signed copy. The credential issuer is always set to our own DID.
        """
        unsigned = dict(credential, issuer=self.did)
        try:
            verification_method = await didkit.key_to_verification_method(
                "key", self.jwk
            )
            signed = await didkit.issue_credential(
                json.dumps(unsigned),
                json.dumps(
                    {
                        "proofPurpose": PROOF_PURPOSE,
                        "verificationMethod": verification_method,
                    }
                ),
                self.jwk,
            )
        except Exception as exc:
            log.error(
                "DIDKit failed to issue credential for provider='%s'",
                unsigned.get("credentialSubject", {}).get("provider"),
                exc_info=True,
            )
            raise IssuanceError() from exc

        return json.loads(signed)

    async def averify_credential(self, credential: dict) -> List[str]:
        """
        Return the list of verification errors for `credential`, an empty list
        means the proof is valid.
        """
        try:
            verification = await didkit.verify_credential(
                json.dumps(credential), json.dumps({"proofPurpose": PROOF_PURPOSE})
            )
            verification = json.loads(verification)
        except Exception as e:
            log.error("Error verifying credential", exc_info=True)
            return [f"Error verifying credential: {e}"]

        return list(verification.get("errors", []))


def get_issuer() -> DIDKitIssuer:
    return DIDKitIssuer()
