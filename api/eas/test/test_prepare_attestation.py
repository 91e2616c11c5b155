"""Prepare a passport attestation feature tests."""

from datetime import timedelta

import pytest
from asgiref.sync import async_to_sync
from eth_account import Account
from eth_account.messages import encode_typed_data
from freezegun import freeze_time
from pytest_bdd import given, parsers, scenario, then, when

from eas.attestation import aprepare_attestation
from eas.exceptions import AttestationError
from eas.schema import EasRequestBody
from eas.signing import ATTESTER_TYPES, get_domain, to_typed_message
from eas.test.conftest import NOW, stamp_credential

pytestmark = pytest.mark.django_db

PROVIDERS = ["Google", "Ens", "Github", "Discord", "Linkedin"]
EXPIRED = {"Ens", "Discord"}


@scenario(
    "features/prepare_attestation.feature",
    "Expired credentials are left out of the attestation",
)
def test_expired_credentials_are_left_out_of_the_attestation():
    """Expired credentials are left out of the attestation."""


@scenario(
    "features/prepare_attestation.feature",
    "An attestation without any valid credential is refused",
)
def test_an_attestation_without_any_valid_credential_is_refused():
    """An attestation without any valid credential is refused."""


@given(
    "a wallet holding five credentials of which two are expired",
    target_fixture="wallet_credentials",
)
def _(recipient):
    """a wallet holding five credentials of which two are expired."""
    return [
        stamp_credential(
            provider,
            recipient,
            expires_in=timedelta(days=-1) if provider in EXPIRED else timedelta(days=90),
        )
        for provider in PROVIDERS
    ]


@given(
    "a wallet holding five credentials which are all expired",
    target_fixture="wallet_credentials",
)
def _(recipient):
    """a wallet holding five credentials which are all expired."""
    return [
        stamp_credential(provider, recipient, expires_in=timedelta(days=-1))
        for provider in PROVIDERS
    ]


@when(
    parsers.parse("the wallet requests an attestation for nonce {nonce:d}"),
    target_fixture="outcome",
)
def _(nonce, wallet_credentials, mock_didkit, mock_fee, nonce_source):
    """the wallet requests an attestation for nonce N."""
    body = EasRequestBody(
        nonce=nonce, credentials=wallet_credentials, dbAccessToken="db-token"
    )
    with freeze_time(NOW):
        try:
            return async_to_sync(aprepare_attestation)(body, nonce_source=nonce_source)
        except AttestationError as e:
            return e


@then("three stamp attestations are prepared for the wallet")
def _(outcome, recipient, settings):
    """three stamp attestations are prepared for the wallet."""
    stamps = outcome.passport.multiAttestationRequest[0]
    assert stamps.schema_uid == settings.EAS_STAMP_SCHEMA_UID
    assert len(stamps.data) == 3
    assert {data.recipient for data in stamps.data} == {recipient}


@then("the two expired credentials are returned as invalid")
def _(outcome):
    """the two expired credentials are returned as invalid."""
    assert {
        credential["credentialSubject"]["provider"]
        for credential in outcome.invalidCredentials
    } == EXPIRED


@then("the payload is signed by the attester")
def _(outcome, attester_account):
    """the payload is signed by the attester."""
    signable = encode_typed_data(
        domain_data=get_domain(),
        message_types=ATTESTER_TYPES,
        message_data=to_typed_message(outcome.passport),
    )
    signature = outcome.signature
    assert (
        Account.recover_message(signable, vrs=(signature.v, signature.r, signature.s))
        == attester_account.address
    )


@then(parsers.parse('the request is refused with "{detail}"'))
def _(outcome, detail):
    """the request is refused with DETAIL."""
    assert isinstance(outcome, AttestationError)
    assert outcome.detail == detail
