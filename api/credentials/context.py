from typing import Any, Callable, Dict, Iterator

from .exceptions import ContextCorruption

_MISSING = object()


class ProviderContext:
    """
    Scratch space shared by the providers verified within one request, so that
    data fetched for one provider (an API response, an access token) can be
    reused by the next one.

    A context is created at the start of a verification call and dropped when
    the call returns. Writes are additive: a key can be set again with an equal
    value, but never overwritten with a different one.
    """

    def __init__(self):
        self._values: Dict[str, Any] = {}

    def __contains__(self, key: str) -> bool:
        return key in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def get(self, key: str, default: Any = None) -> Any:
        return self._values.get(key, default)

    def set(self, key: str, value: Any) -> None:
        current = self._values.get(key, _MISSING)
        if current is not _MISSING and current != value:
            raise ContextCorruption(key)
        self._values[key] = value

    def setdefault(self, key: str, value: Any) -> Any:
        if key not in self._values:
            self._values[key] = value
        return self._values[key]

    async def aget_or_fetch(self, key: str, fetch: Callable) -> Any:
        """
        Return the value stored under `key`, awaiting `fetch()` to compute it
        if no provider did so yet.
        """
        if key not in self._values:
            self.set(key, await fetch())
        return self._values[key]
