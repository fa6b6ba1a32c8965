# pegmatch/ast.py
"""Pattern algebra.

Every pattern is a frozen dataclass deriving from `Pattern`. Nodes carry
data only; matching lives in engine.py and argument checking in
constructors.py. The operator methods on `Pattern` are sugar over the
constructors so that `P("a") * P("b") + P("c")` reads like LPeg.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, FrozenSet, Mapping, Optional, Tuple, Union

import regex

from .errors import UndefinedRule


class Pattern:
    """Base of every pattern node."""

    # ---- operator sugar (coercion happens in constructors) ----

    def __mul__(self, other) -> "Pattern":
        from .constructors import and_
        return and_(self, other)

    def __rmul__(self, other) -> "Pattern":
        from .constructors import and_
        return and_(other, self)

    def __add__(self, other) -> "Pattern":
        from .constructors import or_
        return or_(self, other)

    def __radd__(self, other) -> "Pattern":
        from .constructors import or_
        return or_(other, self)

    def __sub__(self, other) -> "Pattern":
        from .constructors import sub
        return sub(self, other)

    def __rsub__(self, other) -> "Pattern":
        from .constructors import sub
        return sub(other, self)

    def __pow__(self, n) -> "Pattern":
        from .constructors import rep
        return rep(self, n)

    def __neg__(self) -> "Pattern":
        from .constructors import invert
        return invert(self)

    def __pos__(self) -> "Pattern":
        from .constructors import lookahead
        return lookahead(self)

    # ---- named forms ----

    def and_(self, *others) -> "Pattern":
        from .constructors import and_
        return and_(self, *others)

    def or_(self, *others) -> "Pattern":
        from .constructors import or_
        return or_(self, *others)

    def rep(self, n: int = 0) -> "Pattern":
        from .constructors import rep
        return rep(self, n)

    def sub(self, other) -> "Pattern":
        from .constructors import sub
        return sub(self, other)

    def invert(self) -> "Pattern":
        from .constructors import invert
        return invert(self)

    def lookahead(self) -> "Pattern":
        from .constructors import lookahead
        return lookahead(self)


# ---- character-class compilation ----

def _class_item(ch: str) -> str:
    # \UXXXXXXXX is unambiguous inside a class whatever the character is
    return "\\U%08x" % ord(ch)

def _compile_class(singles, ranges) -> "regex.Pattern":
    body = "".join(_class_item(c) for c in sorted(singles))
    body += "".join(_class_item(lo) + "-" + _class_item(hi) for (lo, hi) in ranges)
    if not body:
        return regex.compile(r"(?!)")
    return regex.compile("[" + body + "]")


# ---- string primitives ----

@dataclass(frozen=True)
class Literal(Pattern):
    text: str

@dataclass(frozen=True)
class Truth(Pattern):
    value: bool  # True: always match, False: never match

@dataclass(frozen=True)
class AnyChars(Pattern):
    count: int  # consume exactly `count` characters

@dataclass(frozen=True)
class FewerThan(Pattern):
    count: int  # zero-width: fewer than `count` characters remain

@dataclass(frozen=True)
class CharSet(Pattern):
    chars: FrozenSet[str]
    matcher: Any = field(init=False, repr=False, compare=False, default=None)

    def __post_init__(self) -> None:
        object.__setattr__(self, "matcher", _compile_class(self.chars, ()))

@dataclass(frozen=True)
class CharRange(Pattern):
    # inclusive (lo, hi) pairs of single characters
    ranges: Tuple[Tuple[str, str], ...]
    matcher: Any = field(init=False, repr=False, compare=False, default=None)

    def __post_init__(self) -> None:
        object.__setattr__(self, "matcher", _compile_class((), self.ranges))


# ---- object traversal ----

@dataclass(frozen=True)
class LiteralKey:
    key: Union[str, int]

@dataclass(frozen=True)
class PatternKey:
    pattern: Pattern

KeySelector = Union[LiteralKey, PatternKey]

@dataclass(frozen=True)
class ObjectField(Pattern):
    key: KeySelector
    value: Pattern


# ---- composition ----

@dataclass(frozen=True)
class Sequence(Pattern):
    first: Pattern
    second: Pattern

@dataclass(frozen=True)
class Choice(Pattern):
    first: Pattern
    second: Pattern

@dataclass(frozen=True)
class AtLeast:
    n: int  # n >= 0

@dataclass(frozen=True)
class AtMost:
    n: int  # n > 0

Bound = Union[AtLeast, AtMost]

@dataclass(frozen=True)
class Repeat(Pattern):
    pattern: Pattern
    bound: Bound

@dataclass(frozen=True)
class Difference(Pattern):
    pattern: Pattern
    excluded: Pattern

@dataclass(frozen=True)
class Invert(Pattern):
    pattern: Pattern  # negative lookahead (!)

@dataclass(frozen=True)
class Lookahead(Pattern):
    pattern: Pattern  # positive lookahead (&)


# ---- rules ----

@dataclass(frozen=True)
class RuleRef(Pattern):
    name: str

@dataclass(frozen=True, eq=False)
class Grammar:
    """Named rules plus a root (a rule name or an inline pattern).

    Rules are looked up by name at match time, so forward references and
    cycles need no structural closing. Build through `define_grammar`, which
    validates every reference.
    """
    rules: Mapping[str, Pattern]
    root: Union[str, Pattern]

    def __post_init__(self) -> None:
        if not isinstance(self.rules, MappingProxyType):
            object.__setattr__(self, "rules", MappingProxyType(dict(self.rules)))

    def require_rule(self, name: str) -> Pattern:
        try:
            return self.rules[name]
        except KeyError:
            raise UndefinedRule(name) from None

    @property
    def root_pattern(self) -> Pattern:
        if isinstance(self.root, str):
            return self.require_rule(self.root)
        return self.root

    @property
    def root_name(self) -> Optional[str]:
        return self.root if isinstance(self.root, str) else None

@dataclass(frozen=True)
class GrammarPattern(Pattern):
    grammar: Grammar


# ---- captures ----

@dataclass(frozen=True)
class SpanCapture(Pattern):
    pattern: Pattern

@dataclass(frozen=True)
class ConstCapture(Pattern):
    value: Any

@dataclass(frozen=True)
class PosCapture(Pattern):
    pass

@dataclass(frozen=True)
class Group(Pattern):
    pattern: Pattern
    name: str

@dataclass(frozen=True)
class Collect(Pattern):
    pattern: Pattern


Node = Union[
    Literal, Truth, AnyChars, FewerThan, CharSet, CharRange, ObjectField,
    Sequence, Choice, Repeat, Difference, Invert, Lookahead, RuleRef,
    GrammarPattern, SpanCapture, ConstCapture, PosCapture, Group, Collect,
]
