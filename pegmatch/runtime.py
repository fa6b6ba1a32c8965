# pegmatch/runtime.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Optional, Tuple, Union

from .ast import Grammar, GrammarPattern, Pattern
from .captures import Captures
from .config import MatchOptions, DEFAULT_OPTIONS
from .constructors import P
from .engine import Engine


@dataclass(frozen=True)
class Success:
    """Successful match: cursor after the match, plus the captures in order.

    For object subjects the cursor is always 0 (object patterns are zero width).
    """
    end: int
    captures: Captures = ()

    def __bool__(self) -> bool:
        return True

    @property
    def values(self) -> Tuple[Any, ...]:
        return tuple(c.value for c in self.captures)


class Failure:
    """A normal no-match result. Falsy, carries nothing."""
    __slots__ = ()

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "FAILURE"


FAILURE = Failure()

MatchResult = Union[Success, Failure]


def _start(subject: Any, init: int) -> int:
    if isinstance(init, bool) or not isinstance(init, int):
        raise TypeError(f"init must be an int, got {init!r}")
    if not isinstance(subject, str):
        return 0
    n = len(subject)
    if init < 0:
        init = max(n + init, 0)
    return min(init, n)


def _outer_grammar(grammar) -> Optional[Grammar]:
    if grammar is None or isinstance(grammar, Grammar):
        return grammar
    if isinstance(grammar, GrammarPattern):
        return grammar.grammar
    raise TypeError(f"grammar must be a Grammar, got {type(grammar).__name__}")


class Matcher:
    """A pattern bound to its options, reusable across subjects.

    Every call to `match` builds a fresh Engine, so one Matcher may be used
    from several threads at once.
    """
    def __init__(self, pattern: Any, grammar: Optional[Grammar] = None,
                 options: Optional[MatchOptions] = None):
        self.pattern: Pattern = P(pattern)
        self.grammar = _outer_grammar(grammar)
        self.options = options or DEFAULT_OPTIONS

    def match(self, subject: Any, init: int = 0) -> MatchResult:
        engine = Engine(self.options)
        res = engine.run(self.pattern, subject, _start(subject, init), self.grammar)
        if res is None:
            return FAILURE
        end, caps = res
        return Success(end, caps)


def match(pattern: Any, subject: Any, grammar: Optional[Grammar] = None, *,
          init: int = 0, options: Optional[MatchOptions] = None) -> MatchResult:
    """Match `pattern` against a string or object subject.

    `grammar` resolves bare rule references (`V(...)`) that are not inside a
    grammar pattern. Returns Success(end, captures) or FAILURE.
    """
    return Matcher(pattern, grammar, options).match(subject, init)
