import pytest
from asgiref.sync import async_to_sync

from credentials.context import ProviderContext
from credentials.exceptions import ContextCorruption


def test_set_and_get():
    context = ProviderContext()
    context.set("githubUser", {"login": "gitcoin-dev"})

    assert "githubUser" in context
    assert context.get("githubUser") == {"login": "gitcoin-dev"}
    assert context.get("missing", "default") == "default"
    assert len(context) == 1
    assert list(context) == ["githubUser"]


def test_setting_an_equal_value_is_allowed():
    context = ProviderContext()
    context.set("token", "abc")
    context.set("token", "abc")

    assert context.get("token") == "abc"


def test_overwriting_with_a_different_value_raises():
    context = ProviderContext()
    context.set("token", "abc")

    with pytest.raises(ContextCorruption) as exc_info:
        context.set("token", "xyz")

    assert exc_info.value.key == "token"
    # The value is never part of the message
    assert "xyz" not in str(exc_info.value)
    assert context.get("token") == "abc"


def test_setdefault_keeps_the_first_value():
    context = ProviderContext()

    assert context.setdefault("token", "abc") == "abc"
    assert context.setdefault("token", "xyz") == "abc"


def test_aget_or_fetch_fetches_once():
    context = ProviderContext()
    calls = []

    async def fetch():
        calls.append(1)
        return {"login": "gitcoin-dev"}

    first = async_to_sync(context.aget_or_fetch)("githubUser", fetch)
    second = async_to_sync(context.aget_or_fetch)("githubUser", fetch)

    assert first == second == {"login": "gitcoin-dev"}
    assert len(calls) == 1
