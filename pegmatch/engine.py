# pegmatch/engine.py
from __future__ import annotations
import sys
from collections.abc import Mapping
from typing import Any, Dict, Optional, Set, Tuple

from .ast import (
    Pattern, Literal, Truth, AnyChars, FewerThan, CharSet, CharRange,
    ObjectField, LiteralKey, Sequence, Choice, Repeat, AtLeast, Difference,
    Invert, Lookahead, RuleRef, Grammar, GrammarPattern, SpanCapture,
    ConstCapture, PosCapture, Group, Collect,
)
from .captures import Capture, Captures, relabel, collect
from .config import MatchOptions, DEFAULT_OPTIONS
from .errors import (
    UndefinedRule, MatchDepthExceeded, MatchStepsExceeded, LeftRecursionDetected,
)

# Recursive evaluator:
# - every evaluation returns (end, captures) on success or None on failure;
#   nothing is mutated, so a failed branch leaves no trace to undo
# - string subjects carry an integer cursor; any other subject is an object
#   and every pattern is zero width on it (cursor stays 0)
# - rule applications are tracked while in progress: re-entering the same
#   rule at the same place means unguarded left recursion, which is fatal
# - optional memo of rule applications, scoped to one engine (= one call)

Result = Optional[Tuple[int, Captures]]
Path = Tuple[Any, ...]


def _eprint(*args, **kw) -> None:
    print(*args, file=sys.stderr, **kw)


def _fields(subject: Any):
    if isinstance(subject, Mapping):
        return subject.items()
    return enumerate(subject)


class Engine:
    def __init__(self, options: MatchOptions = DEFAULT_OPTIONS):
        self.options = options
        self.steps = 0
        # rule applications in progress: (grammar id, rule, subject key, pos, path)
        self.active: Set[Tuple] = set()
        self.memo: Optional[Dict[Tuple, Result]] = {} if options.memoize else None

    # ---- Public entrypoint ----
    def run(self, pattern: Pattern, subject: Any, pos: int = 0,
            grammar: Optional[Grammar] = None) -> Result:
        debug = self.options.debug
        if debug:
            _eprint("[DEBUG] match start | subject=%s pos=%d" % (type(subject).__name__, pos))
        try:
            res = self._eval(pattern, subject, pos, grammar, (), 0)
        except RecursionError as e:
            raise MatchDepthExceeded("host recursion limit reached while matching") from e
        if debug:
            if res is None:
                _eprint("[DEBUG] match fail | steps=%d" % self.steps)
            else:
                _eprint("[DEBUG] match ok | end=%d captures=%d steps=%d" %
                        (res[0], len(res[1]), self.steps))
        return res

    # ---- Rule application ----
    def _apply_rule(self, g: Grammar, name: str, s: Any, pos: int,
                    path: Path, depth: int) -> Result:
        is_text = isinstance(s, str)
        # strings are keyed by value: key subjects built with str() are short-lived
        key = (id(g), name, s if is_text else id(s), pos, None if is_text else path)

        if self.memo is not None and key in self.memo:
            return self.memo[key]
        if key in self.active:
            raise LeftRecursionDetected(name, pos)

        body = g.require_rule(name)
        self.active.add(key)
        try:
            res = self._eval(body, s, pos, g, path, depth)
        finally:
            self.active.discard(key)

        if self.options.debug:
            outcome = "fail" if res is None else "ok end=%d" % res[0]
            _eprint("[DEBUG] rule %s @ %d -> %s" % (name, pos, outcome))
        if self.memo is not None:
            self.memo[key] = res
        return res

    # ---- Evaluator ----
    def _eval(self, node: Pattern, s: Any, pos: int, g: Optional[Grammar],
              path: Path, depth: int) -> Result:
        self.steps += 1
        opts = self.options
        if opts.max_steps is not None and self.steps > opts.max_steps:
            raise MatchStepsExceeded(f"more than {opts.max_steps} evaluation steps")
        if opts.max_depth is not None and depth >= opts.max_depth:
            raise MatchDepthExceeded(f"pattern nesting deeper than {opts.max_depth}")
        d = depth + 1
        is_text = isinstance(s, str)

        if isinstance(node, Literal):
            if is_text and s.startswith(node.text, pos):
                return pos + len(node.text), ()
            return None

        if isinstance(node, Truth):
            return (pos, ()) if node.value else None

        if isinstance(node, AnyChars):
            if is_text and len(s) - pos >= node.count:
                return pos + node.count, ()
            return None

        if isinstance(node, FewerThan):
            if is_text and len(s) - pos < node.count:
                return pos, ()
            return None

        if isinstance(node, (CharSet, CharRange)):
            if is_text and pos < len(s) and node.matcher.match(s, pos):
                return pos + 1, ()
            return None

        if isinstance(node, ObjectField):
            if is_text or not isinstance(s, (Mapping, list, tuple)):
                return None
            if isinstance(node.key, LiteralKey):
                k = node.key.key
                if isinstance(s, Mapping):
                    if k not in s:
                        return None
                elif not isinstance(k, int) or not 0 <= k < len(s):
                    return None
                r = self._eval(node.value, s[k], 0, g, path + (k,), d)
                if r is None:
                    return None
                return pos, r[1]
            selector = node.key.pattern
            for k, v in _fields(s):
                kr = self._eval(selector, k if isinstance(k, str) else str(k), 0, g, path, d)
                if kr is None:
                    continue
                vr = self._eval(node.value, v, 0, g, path + (k,), d)
                if vr is None:
                    continue
                return pos, kr[1] + vr[1]
            return None

        if isinstance(node, Sequence):
            r1 = self._eval(node.first, s, pos, g, path, d)
            if r1 is None:
                return None
            r2 = self._eval(node.second, s, r1[0], g, path, d)
            if r2 is None:
                return None
            return r2[0], r1[1] + r2[1]

        if isinstance(node, Choice):
            r = self._eval(node.first, s, pos, g, path, d)
            if r is not None:
                return r
            return self._eval(node.second, s, pos, g, path, d)

        if isinstance(node, Repeat):
            n = node.bound.n
            cur = pos
            count = 0
            caps = []
            if isinstance(node.bound, AtLeast):
                while True:
                    r = self._eval(node.pattern, s, cur, g, path, d)
                    if r is None:
                        break
                    end, c = r
                    # zero-width iterations only count toward the minimum
                    if end == cur and count >= n:
                        break
                    caps.extend(c)
                    count += 1
                    cur = end
                if count < n:
                    return None
            else:
                while count < n:
                    r = self._eval(node.pattern, s, cur, g, path, d)
                    if r is None:
                        break
                    cur, c = r
                    caps.extend(c)
                    count += 1
            return cur, tuple(caps)

        if isinstance(node, Difference):
            if self._eval(node.excluded, s, pos, g, path, d) is not None:
                return None
            return self._eval(node.pattern, s, pos, g, path, d)

        if isinstance(node, Invert):
            if self._eval(node.pattern, s, pos, g, path, d) is not None:
                return None
            return pos, ()

        if isinstance(node, Lookahead):
            if self._eval(node.pattern, s, pos, g, path, d) is None:
                return None
            return pos, ()

        if isinstance(node, RuleRef):
            if g is None:
                raise UndefinedRule(node.name, "a pattern matched outside any grammar")
            return self._apply_rule(g, node.name, s, pos, path, d)

        if isinstance(node, GrammarPattern):
            inner = node.grammar
            if inner.root_name is not None:
                return self._apply_rule(inner, inner.root_name, s, pos, path, d)
            return self._eval(inner.root, s, pos, inner, path, d)

        if isinstance(node, SpanCapture):
            r = self._eval(node.pattern, s, pos, g, path, d)
            if r is None:
                return None
            end, c = r
            value = s[pos:end] if is_text else s
            return end, (Capture(value),) + c

        if isinstance(node, ConstCapture):
            return pos, (Capture(node.value),)

        if isinstance(node, PosCapture):
            return pos, (Capture(pos if is_text else path),)

        if isinstance(node, Group):
            r = self._eval(node.pattern, s, pos, g, path, d)
            if r is None:
                return None
            return r[0], relabel(r[1], node.name)

        if isinstance(node, Collect):
            r = self._eval(node.pattern, s, pos, g, path, d)
            if r is None:
                return None
            return r[0], (collect(r[1]),)

        raise AssertionError(f"unknown node: {node!r}")
