from credentials.context import ProviderContext
from credentials.schema import RequestPayload, VerifiedPayload


class Provider:
    """
    A single stamp provider. Implementations check the proofs in the payload
    against their own platform and report the outcome, they never raise for a
    proof that simply does not hold.
    """

    type: str = ""

    async def averify(
        self, payload: RequestPayload, context: ProviderContext
    ) -> VerifiedPayload:
        raise NotImplementedError
