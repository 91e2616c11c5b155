from ninja_extra import status
from ninja_extra.exceptions import APIException


class IssuanceError(APIException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Unable to issue credential."


class InvalidChallengeRequest(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Unable to verify payload."


class ContextCorruption(Exception):
    """
    Raised when two providers write conflicting values for the same key of a
    ProviderContext. This is a bug in one of the providers and is never
    resolved silently.
    """

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"Conflicting value written to provider context key '{key}'")
