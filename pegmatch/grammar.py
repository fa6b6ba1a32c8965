# pegmatch/grammar.py
"""Grammar resolver.

A grammar is a read-only name -> pattern mapping plus a root. References
(`V(name)`) stay symbolic and are looked up when the engine meets them, so
mutually recursive rules need no special construction order. Before a
grammar is handed out, every reference in every rule is checked against
the rule map (eager validation), so a dangling name is reported at
construction and never in the middle of a match.
"""

from __future__ import annotations
from collections.abc import Mapping
from typing import Any, Dict, Iterator, List, Optional, Tuple

from .ast import (
    Pattern, Grammar, RuleRef, ObjectField, PatternKey,
    Sequence, Choice, Repeat, Difference, Invert, Lookahead, SpanCapture, Group,
    Collect,
)
from .errors import InvalidGrammarDefinition, InvalidPatternArgument, UndefinedRule

# key of a grammar mapping that designates the root
ROOT_KEYS = ("0", 0)


def _children(node: Pattern) -> Tuple[Pattern, ...]:
    if isinstance(node, (Sequence, Choice)):
        return (node.first, node.second)
    if isinstance(node, Difference):
        return (node.pattern, node.excluded)
    if isinstance(node, (Repeat, Invert, Lookahead, SpanCapture, Group, Collect)):
        return (node.pattern,)
    if isinstance(node, ObjectField):
        if isinstance(node.key, PatternKey):
            return (node.key.pattern, node.value)
        return (node.value,)
    # leaves, and nested grammars (validated when they were built)
    return ()


def iter_rule_refs(pattern: Pattern) -> Iterator[str]:
    """Yield the names referenced by `pattern`, outside nested grammars."""
    seen = set()
    stack: List[Pattern] = [pattern]
    while stack:
        node = stack.pop()
        if id(node) in seen:
            continue
        seen.add(id(node))
        if isinstance(node, RuleRef):
            yield node.name
            continue
        stack.extend(reversed(_children(node)))


def validate_grammar(g: Grammar) -> None:
    """Fail with UndefinedRule on the first reference that names no rule."""
    for name, body in g.rules.items():
        for ref in iter_rule_refs(body):
            if ref not in g.rules:
                raise UndefinedRule(ref, f"rule '{name}'")
    if isinstance(g.root, Pattern):
        for ref in iter_rule_refs(g.root):
            if ref not in g.rules:
                raise UndefinedRule(ref, "grammar root")


def _coerce_rule(name: str, body: Any) -> Pattern:
    from .constructors import P
    try:
        return P(body)
    except InvalidPatternArgument as e:
        raise InvalidGrammarDefinition(f"rule '{name}': {e}") from e


def define_grammar(rules: Mapping, root: Optional[Any] = None) -> Grammar:
    """Build and validate a grammar.

    `root` is a rule name or an inline pattern; when omitted, the first rule
    (in insertion order) is the root.
    """
    if not isinstance(rules, Mapping):
        raise InvalidGrammarDefinition(f"rules must be a mapping, got {type(rules).__name__}")

    normalized: Dict[str, Pattern] = {}
    for name, body in rules.items():
        if not isinstance(name, str) or not name:
            raise InvalidGrammarDefinition(f"rule names must be non-empty strings, got {name!r}")
        if name in ROOT_KEYS:
            raise InvalidGrammarDefinition("'0' is reserved for the grammar root")
        normalized[name] = _coerce_rule(name, body)
    if not normalized:
        raise InvalidGrammarDefinition("empty grammar")

    if root is None:
        root = next(iter(normalized))
    elif isinstance(root, str):
        if root not in normalized:
            raise UndefinedRule(root, "grammar root")
    else:
        root = _coerce_rule("0", root)

    g = Grammar(normalized, root)
    validate_grammar(g)
    return g


def grammar_from_mapping(m: Mapping) -> Grammar:
    """Split a grammar literal into its root entry and its rules."""
    root = None
    rules: Dict[Any, Any] = {}
    for k, v in m.items():
        if k in ROOT_KEYS and not isinstance(k, bool):
            root = v
        else:
            rules[k] = v
    return define_grammar(rules, root)
