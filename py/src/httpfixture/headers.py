from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from typing import Any

from httpfixture.errors import DuplicateHeaderError


class Headers(Mapping[str, str]):
    """Ordered, immutable header mapping with case-insensitive lookup.

    Names keep the case they were written with; ``headers["content-type"]``
    and ``headers["Content-Type"]`` resolve to the same entry. Building a
    ``Headers`` from pairs that repeat a name (ignoring case) raises
    :class:`DuplicateHeaderError`.
    """

    __slots__ = ("_items", "_index")

    def __init__(self, items: Mapping[str, str] | Iterable[tuple[str, str]] | None = None) -> None:
        pairs = list(items.items()) if isinstance(items, Mapping) else list(items or [])
        normalized: list[tuple[str, str]] = []
        index: dict[str, int] = {}
        for name, value in pairs:
            name_value = str(name)
            key = name_value.lower()
            if key in index:
                raise DuplicateHeaderError(message=f"duplicate header {name_value!r}", name=name_value)
            index[key] = len(normalized)
            normalized.append((name_value, str(value)))
        self._items: tuple[tuple[str, str], ...] = tuple(normalized)
        self._index = index

    @classmethod
    def from_actual(cls, headers: Mapping[str, Any] | None) -> Headers:
        """Build headers from an observed response.

        Accepts plain string values as well as the list-valued canonical form
        (``{"content-type": ["application/json"]}``). Case-variant duplicates
        are merged rather than rejected.
        """
        if isinstance(headers, Headers):
            return headers
        merged: dict[str, tuple[str, list[str]]] = {}
        for name, value in (headers or {}).items():
            values = value if isinstance(value, (list, tuple)) else [value]
            key = str(name).strip().lower()
            if not key:
                continue
            if key not in merged:
                merged[key] = (str(name).strip(), [])
            merged[key][1].extend(str(v) for v in values)
        return cls((name, ", ".join(values)) for name, values in merged.values())

    def __getitem__(self, name: str) -> str:
        if not isinstance(name, str):
            raise KeyError(name)
        pos = self._index.get(name.lower())
        if pos is None:
            raise KeyError(name)
        return self._items[pos][1]

    def __iter__(self) -> Iterator[str]:
        return (name for name, _ in self._items)

    def __len__(self) -> int:
        return len(self._items)

    def canonical(self) -> dict[str, str]:
        return {name.lower(): value for name, value in self._items}

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Headers):
            return self.canonical() == other.canonical()
        if isinstance(other, Mapping):
            try:
                return self.canonical() == {str(k).lower(): v for k, v in other.items()}
            except AttributeError:
                return NotImplemented
        return NotImplemented

    def __hash__(self) -> int:
        return hash(frozenset(self.canonical().items()))

    def __repr__(self) -> str:
        return f"Headers({list(self._items)!r})"
