"""Ordered key/value configuration handed to the mini cluster.

Keys and values are plain strings and are never validated; the cluster
backend decides what they mean.  Insertion order is kept so the
generated configuration file lists properties in the order they were
set.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping, MutableMapping
from typing import Any

Overrides = Mapping[str, str] | Iterable[tuple[str, str]]


class Configuration(MutableMapping[str, str]):
    """A mutable, insertion-ordered ``str -> str`` mapping.

    Values are coerced with ``str()`` on assignment, mirroring how
    property files treat every value as text.
    """

    def __init__(self, initial: Overrides | None = None) -> None:
        self._props: dict[str, str] = {}
        if initial is not None:
            self.apply(initial)

    def __getitem__(self, key: str) -> str:
        return self._props[key]

    def __setitem__(self, key: str, value: Any) -> None:
        self._props[str(key)] = str(value)

    def __delitem__(self, key: str) -> None:
        del self._props[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._props)

    def __len__(self) -> int:
        return len(self._props)

    def __repr__(self) -> str:
        return f"Configuration({self._props!r})"

    def apply(self, overrides: Overrides | None) -> Configuration:
        """Apply *overrides* in order; later keys overwrite earlier ones.

        Returns ``self`` so calls can be chained.
        """
        if not overrides:
            return self
        pairs = overrides.items() if isinstance(overrides, Mapping) else overrides
        for key, value in pairs:
            self[key] = value
        return self

    def copy(self) -> Configuration:
        return Configuration(self._props)

    def to_dict(self) -> dict[str, str]:
        return dict(self._props)


def parse_property(text: str) -> tuple[str, str]:
    """Parse a ``key=value`` assignment.

    Only the first ``=`` separates key from value, so values may contain
    ``=`` themselves.  Raises ValueError when there is no ``=`` or the key
    is blank.
    """
    key, sep, value = text.partition("=")
    key = key.strip()
    if not sep or not key:
        msg = f"Expected KEY=VALUE, got {text!r}"
        raise ValueError(msg)
    return key, value
