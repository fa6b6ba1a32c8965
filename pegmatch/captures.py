# pegmatch/captures.py
"""Capture values and the grouping/collection steps applied to them.

Capture lists are plain tuples so that a failed branch can simply be
dropped: nothing is ever appended in place.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Iterator, Mapping, Optional, Tuple, Union


@dataclass(frozen=True)
class Capture:
    value: Any
    name: Optional[str] = None


Captures = Tuple[Capture, ...]


@dataclass(frozen=True)
class CaptureTable:
    """Composite produced by `Ct`.

    items  : unnamed captures, in match order
    fields : named captures, read-only (the last capture written under a name wins)

    The table behaves as a sequence of its items: integer subscripts, `len`,
    iteration and `in` all look at `items`. String subscripts and `get`
    read `fields`; use `name in table.fields` to test for a field.
    """
    items: Tuple[Any, ...] = ()
    fields: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not isinstance(self.fields, MappingProxyType):
            object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))

    def __hash__(self) -> int:
        return hash((self.items, frozenset(self.fields.items())))

    def __getitem__(self, key: Union[int, str]) -> Any:
        if isinstance(key, str):
            return self.fields[key]
        return self.items[key]

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[Any]:
        return iter(self.items)

    def __contains__(self, value) -> bool:
        return value in self.items

    def get(self, name: str, default: Any = None) -> Any:
        return self.fields.get(name, default)


def relabel(caps: Captures, name: str) -> Captures:
    return tuple(Capture(c.value, name) for c in caps)


def collect(caps: Captures) -> Capture:
    items = []
    fields: Dict[str, Any] = {}
    for c in caps:
        if c.name is None:
            items.append(c.value)
        else:
            fields[c.name] = c.value
    return Capture(CaptureTable(tuple(items), fields))
