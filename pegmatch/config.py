# pegmatch/config.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Optional


def _check_ceiling(name: str, value) -> None:
    if value is None:
        return
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValueError(f"{name} must be a positive int or None, got {value!r}")


@dataclass(frozen=True)
class MatchOptions:
    """Per-call matching knobs.

    - max_depth : ceiling on nested pattern evaluation (one level per pattern node),
                  None = bounded only by the interpreter's recursion limit
    - max_steps : ceiling on pattern evaluations for a whole call, None = unbounded
    - memoize   : cache rule applications per (grammar, rule, subject, position)
    - debug     : print [DEBUG] trace lines to stderr
    """
    max_depth: Optional[int] = None
    max_steps: Optional[int] = None
    memoize: bool = False
    debug: bool = False

    def __post_init__(self) -> None:
        _check_ceiling("max_depth", self.max_depth)
        _check_ceiling("max_steps", self.max_steps)


DEFAULT_OPTIONS = MatchOptions()
