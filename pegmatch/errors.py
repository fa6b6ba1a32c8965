# pegmatch/errors.py
"""Exception hierarchy.

Two disjoint families:
- construction errors (bad pattern arguments, malformed grammars), raised
  while building patterns and never during matching
- resource exhaustion, raised while matching when a grammar misbehaves

An ordinary failed match is *not* an error; see `runtime.FAILURE`.
"""

from __future__ import annotations
from typing import Optional


class PegError(Exception):
    pass


class InvalidPatternArgument(PegError, ValueError):
    pass


class InvalidGrammarDefinition(PegError, ValueError):
    pass


class UndefinedRule(InvalidGrammarDefinition):
    def __init__(self, name: str, where: Optional[str] = None):
        self.name = name
        msg = f"undefined rule '{name}'"
        if where:
            msg += f" (referenced from {where})"
        super().__init__(msg)


class ResourceExhausted(PegError, RuntimeError):
    pass


class MatchDepthExceeded(ResourceExhausted):
    pass


class MatchStepsExceeded(ResourceExhausted):
    pass


class LeftRecursionDetected(ResourceExhausted):
    def __init__(self, rule: str, pos: int):
        self.rule = rule
        self.pos = pos
        super().__init__(
            f"rule '{rule}' re-entered at position {pos} without consuming input")
