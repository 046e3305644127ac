"""Depth limiting for recursive tree walks.

The parser bounds syntactic nesting while it builds the tree; DepthGuard
bounds recursion for visitors walking a finished tree, including trees
built by hand rather than parsed. Each guard keeps its own counter.

Python 3.13+.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field

from pslocdata.constants import MAX_TREE_DEPTH
from pslocdata.diagnostics import ScriptParseError
from pslocdata.diagnostics.templates import ErrorTemplate

__all__ = ["DepthGuard", "DepthLimitExceededError", "depth_clamp"]

logger = logging.getLogger(__name__)


class DepthLimitExceededError(ScriptParseError):
    """Raised when a tree walk exceeds the maximum depth."""


@dataclass(slots=True)
class DepthGuard:
    """Re-entrant depth counter used around each recursive visit.

    Every ``with guard:`` block is one tree level. Entering past max_depth
    raises DepthLimitExceededError (a ScriptParseError, so callers handle
    a too-deep tree like any other unusable module).

    Usage:
        with self._depth_guard:
            for child in children:
                self.visit(child)

    Attributes:
        max_depth: Deepest level allowed (default: MAX_TREE_DEPTH, clamped)
        current_depth: Levels currently entered
    """

    max_depth: int = MAX_TREE_DEPTH
    current_depth: int = field(default=0, init=False)

    def __post_init__(self) -> None:
        """Keep max_depth below what the interpreter stack can hold."""
        self.max_depth = depth_clamp(self.max_depth)

    def __enter__(self) -> DepthGuard:
        """Enter one level, raising before the counter moves."""
        if self.current_depth >= self.max_depth:
            raise DepthLimitExceededError(ErrorTemplate.nesting_depth_exceeded(self.max_depth))
        self.current_depth += 1
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        """Leave one level."""
        self.current_depth -= 1

    @property
    def depth(self) -> int:
        """Levels currently entered."""
        return self.current_depth


def depth_clamp(requested_depth: int, reserve_frames: int = 50) -> int:
    """Limit a requested depth to what sys.getrecursionlimit() allows.

    A guarded level costs two interpreter frames (visit and generic_visit)
    and reserve_frames are kept for the caller, so the ceiling is
    ``(recursionlimit - reserve_frames) // 2``. Larger requests are logged
    and lowered.

    Example:
        >>> depth_clamp(100)
        100
    """
    max_safe_depth = (sys.getrecursionlimit() - reserve_frames) // 2
    if requested_depth > max_safe_depth:
        logger.warning(
            "Tree depth %d does not fit recursion limit %d; using %d",
            requested_depth,
            sys.getrecursionlimit(),
            max_safe_depth,
        )
        return max_safe_depth
    return requested_depth
