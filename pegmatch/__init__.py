# pegmatch/__init__.py
"""PEG pattern matching over strings and object trees.

This package provides:
- an immutable pattern algebra (P, S, R, O, V and the and_/or_/rep/sub/invert operators)
- grammars with lazily resolved, possibly cyclic rules
- a backtracking matcher for string and object subjects
- captures (C, Cc, Cp, Cg, Ct) threaded through the match
"""

from .ast import (
    Pattern, Literal, Truth, AnyChars, FewerThan, CharSet, CharRange,
    LiteralKey, PatternKey, ObjectField, Sequence, Choice, AtLeast, AtMost,
    Repeat, Difference, Invert, Lookahead, RuleRef, Grammar, GrammarPattern,
    SpanCapture, ConstCapture, PosCapture, Group, Collect,
)
from .captures import Capture, CaptureTable
from .config import MatchOptions
from .constructors import (
    P, S, R, O, V, C, Cc, Cp, Cg, Ct, and_, or_, rep, sub, invert, lookahead,
)
from .errors import (
    PegError, InvalidPatternArgument, InvalidGrammarDefinition, UndefinedRule,
    ResourceExhausted, MatchDepthExceeded, MatchStepsExceeded, LeftRecursionDetected,
)
from .grammar import define_grammar
from .runtime import Success, Failure, FAILURE, Matcher, match
