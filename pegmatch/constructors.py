# pegmatch/constructors.py
"""Public pattern constructors.

Each constructor resolves its (dynamically typed) argument into exactly one
validated node from ast.py. Anything that cannot be turned into a pattern
raises InvalidPatternArgument here, never later during matching.
"""

from __future__ import annotations
from collections.abc import Mapping
from typing import Any, List, Tuple

from .ast import (
    Pattern, Literal, Truth, AnyChars, FewerThan, CharSet, CharRange,
    LiteralKey, PatternKey, ObjectField, Sequence, Choice, AtLeast, AtMost,
    Repeat, Difference, Invert, Lookahead, RuleRef, SpanCapture, ConstCapture,
    PosCapture, Group, Collect,
)
from .errors import InvalidPatternArgument


def _is_int(x: Any) -> bool:
    return isinstance(x, int) and not isinstance(x, bool)


# ---- primitives ----

def P(arg: Any) -> Pattern:
    """Coerce `arg` into a pattern.

    - Pattern         -> itself
    - True / False    -> always / never match
    - n >= 0          -> exactly n characters
    - -n              -> fewer than n characters remain (zero width)
    - str             -> that exact text
    - mapping         -> grammar; key "0" names the root, other keys are rules
    """
    if isinstance(arg, Pattern):
        return arg
    if isinstance(arg, bool):
        return Truth(arg)
    if _is_int(arg):
        if arg >= 0:
            return AnyChars(arg)
        return FewerThan(-arg)
    if isinstance(arg, str):
        return Literal(arg)
    if isinstance(arg, Mapping):
        from .grammar import grammar_from_mapping
        from .ast import GrammarPattern
        return GrammarPattern(grammar_from_mapping(arg))
    raise InvalidPatternArgument(f"P: cannot make a pattern from {type(arg).__name__} {arg!r}")


def S(arg: Any) -> Pattern:
    """Match one character from a set (a string, or a mapping keyed by single characters)."""
    if isinstance(arg, str):
        return CharSet(frozenset(arg))
    if isinstance(arg, Mapping):
        for k in arg:
            if not isinstance(k, str) or len(k) != 1:
                raise InvalidPatternArgument(f"S: set keys must be single characters, got {k!r}")
        return CharSet(frozenset(arg))
    raise InvalidPatternArgument(f"S: expected a string or mapping, got {type(arg).__name__}")


def R(*args: Any) -> Pattern:
    """Match one character inside any inclusive range: R("az", "09") or R(["az", "09"])."""
    if len(args) == 1 and isinstance(args[0], (list, tuple)):
        args = tuple(args[0])
    if not args:
        raise InvalidPatternArgument("R: at least one range is required")
    ranges: List[Tuple[str, str]] = []
    for r in args:
        if not isinstance(r, str) or len(r) != 2:
            raise InvalidPatternArgument(f"R: ranges must be two-character strings, got {r!r}")
        lo, hi = r[0], r[1]
        if ord(lo) > ord(hi):
            raise InvalidPatternArgument(f"R: empty range {r!r} (low bound above high bound)")
        ranges.append((lo, hi))
    return CharRange(tuple(ranges))


def O(key: Any, value: Any = True) -> Pattern:
    """Match a field of an object subject.

    `key` is either a literal key (looked up directly) or a pattern tried
    against every key; `value` is matched against the field's value.
    """
    if isinstance(key, Pattern):
        selector = PatternKey(key)
    elif isinstance(key, str) or _is_int(key):
        selector = LiteralKey(key)
    else:
        raise InvalidPatternArgument(
            f"O: key must be a str/int literal or a pattern, got {type(key).__name__}")
    return ObjectField(selector, P(value))


def V(name: Any) -> Pattern:
    if not isinstance(name, str) or not name:
        raise InvalidPatternArgument(f"V: rule name must be a non-empty string, got {name!r}")
    return RuleRef(name)


# ---- operators ----

def and_(*patterns: Any) -> Pattern:
    """Sequence: and_(a, b, c) == a * (b * c)."""
    if not patterns:
        raise InvalidPatternArgument("and_: at least one pattern is required")
    ps = [P(p) for p in patterns]
    out = ps[-1]
    for p in reversed(ps[:-1]):
        out = Sequence(p, out)
    return out


def or_(*patterns: Any) -> Pattern:
    """Ordered choice: or_(a, b, c) == a + (b + c)."""
    if not patterns:
        raise InvalidPatternArgument("or_: at least one pattern is required")
    ps = [P(p) for p in patterns]
    out = ps[-1]
    for p in reversed(ps[:-1]):
        out = Choice(p, out)
    return out


def rep(pattern: Any, n: Any = 0) -> Pattern:
    """n >= 0: at least n repetitions; n < 0: at most -n repetitions."""
    if not _is_int(n):
        raise InvalidPatternArgument(f"rep: bound must be an int, got {n!r}")
    bound = AtLeast(n) if n >= 0 else AtMost(-n)
    return Repeat(P(pattern), bound)


def sub(pattern: Any, excluded: Any) -> Pattern:
    return Difference(P(pattern), P(excluded))


def invert(pattern: Any) -> Pattern:
    return Invert(P(pattern))


def lookahead(pattern: Any) -> Pattern:
    return Lookahead(P(pattern))


# ---- captures ----

def C(pattern: Any) -> Pattern:
    return SpanCapture(P(pattern))


def Cc(value: Any) -> Pattern:
    return ConstCapture(value)


def Cp() -> Pattern:
    return PosCapture()


def Cg(pattern: Any, name: Any) -> Pattern:
    if not isinstance(name, str) or not name:
        raise InvalidPatternArgument(f"Cg: group name must be a non-empty string, got {name!r}")
    return Group(P(pattern), name)


def Ct(pattern: Any) -> Pattern:
    return Collect(P(pattern))
