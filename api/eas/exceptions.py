from ninja_extra import status
from ninja_extra.exceptions import APIException


class AttestationError(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Unable to prepare attestation."


class NoValidCredentialsException(AttestationError):
    default_detail = "No verifiable credentials provided."


class FeeUnavailableException(AttestationError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = "Unable to determine the attestation fee."


class InvalidNonceException(AttestationError):
    default_detail = "Invalid nonce."
