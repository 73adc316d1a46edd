"""Query string access for requests.

Policies and handlers read the query through ``request.query``; routing
never matches on it.
"""

from collections.abc import Iterator, Mapping
from urllib.parse import parse_qsl


class QueryParams(Mapping[str, str]):
    """Parsed query string, first value per key.

    Repeated keys keep every value in order; ``get_list`` returns them.
    Blank values are kept, so ``?flag=`` yields ``{"flag": ""}``.
    """

    __slots__ = ("_pairs", "_raw")

    def __init__(self, query_string: str = "") -> None:
        self._raw = query_string
        self._pairs = tuple(parse_qsl(query_string, keep_blank_values=True))

    def __getitem__(self, key: str) -> str:
        for name, value in self._pairs:
            if name == key:
                return value
        raise KeyError(key)

    def __iter__(self) -> Iterator[str]:
        return iter(dict.fromkeys(name for name, _ in self._pairs))

    def __len__(self) -> int:
        return len(dict.fromkeys(name for name, _ in self._pairs))

    def __repr__(self) -> str:
        return f"QueryParams({self._raw!r})"

    def __str__(self) -> str:
        return self._raw

    def get_list(self, key: str) -> list[str]:
        """Every value given for *key*, in query order."""
        return [value for name, value in self._pairs if name == key]
