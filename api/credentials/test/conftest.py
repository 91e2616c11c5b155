# pylint: disable=redefined-outer-name
import pytest
from asgiref.sync import async_to_sync
from eth_account.messages import encode_defunct
from web3 import Web3

from credentials.challenge import aissue_challenge
from credentials.context import ProviderContext
from credentials.providers import ProviderRegistry
from credentials.providers.base import Provider
from credentials.schema import RequestPayload, VerifiedPayload

web3 = Web3()

GITHUB_USERNAME = "gitcoin-dev"


class GithubProvider(Provider):
    type = "Github"

    async def averify(
        self, payload: RequestPayload, context: ProviderContext
    ) -> VerifiedPayload:
        async def fetch_user():
            code = (payload.proofs or {}).get("code")
            return {"login": GITHUB_USERNAME} if code == "valid-code" else None

        user = await context.aget_or_fetch("githubUser", fetch_user)
        if not user:
            return VerifiedPayload(valid=False, error=["Github account not found"])
        return VerifiedPayload(valid=True, record={"username": user["login"]})


class FiveOrMoreGithubReposProvider(Provider):
    type = "FiveOrMoreGithubRepos"

    async def averify(
        self, payload: RequestPayload, context: ProviderContext
    ) -> VerifiedPayload:
        # Relies on the user fetched by the Github provider
        user = context.get("githubUser")
        if not user:
            return VerifiedPayload(valid=False, error=["Github account not found"])
        return VerifiedPayload(
            valid=True, record={"username": user["login"]}, expires_in_seconds=3600
        )


class FailingProvider(Provider):
    type = "Failing"

    async def averify(self, payload, context):
        raise RuntimeError("platform unavailable")


class OverridingProvider(Provider):
    type = "Overriding"

    async def averify(self, payload, context):
        return VerifiedPayload(
            valid=True, record={"username": "u", "version": "9", "provider": "x"}
        )


class SignerProvider(Provider):
    type = "SignerAddress"

    async def averify(self, payload, context):
        signer = context.get("signer")
        if not signer:
            return VerifiedPayload(valid=False, error=["No signer"])
        return VerifiedPayload(valid=True, record={"signer": signer})


class CorruptingProvider(Provider):
    type = "Corrupting"

    async def averify(self, payload, context):
        context.set("githubUser", {"login": "someone-else"})
        return VerifiedPayload(valid=True, record={"username": "someone-else"})


@pytest.fixture
def provider_registry():
    return ProviderRegistry(
        [
            GithubProvider(),
            FiveOrMoreGithubReposProvider(),
            FailingProvider(),
            CorruptingProvider(),
            OverridingProvider(),
            SignerProvider(),
        ]
    )


@pytest.fixture
def holder(passport_holder_addresses):
    return passport_holder_addresses[0]


@pytest.fixture
def github_payload(holder):
    return RequestPayload(
        type="Github",
        address=holder["address"],
        version="0.0.0",
        proofs={"code": "valid-code"},
    )


def sign_challenge(challenge: dict, key) -> str:
    signed = web3.eth.account.sign_message(
        encode_defunct(text=challenge["credentialSubject"]["challenge"]),
        private_key=key,
    )
    return Web3.to_hex(signed.signature)


@pytest.fixture
def issue_signed_challenge(mock_didkit, holder):
    """Issue a challenge for `payload` and add the holder's signature to its proofs"""

    def _issue(payload: RequestPayload, key=None):
        challenge = async_to_sync(aissue_challenge)(payload)
        proofs = dict(payload.proofs or {})
        proofs["signature"] = sign_challenge(challenge, key or holder["key"])
        return challenge, payload.model_copy(update={"proofs": proofs})

    return _issue
