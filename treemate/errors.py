"""
TreeMate error hierarchy.

All engine exceptions inherit from TreeMateError. Invariant violations mean
the search tree is corrupted; they are raised and never caught by the engine.

Usage:
    from treemate.errors import IllegalMoveError

    try:
        engine.make_move(4)
    except IllegalMoveError as e:
        print(e.message, e.context)
"""

from typing import Any, Dict, Optional

__all__ = [
    "TreeMateError",
    "InvariantViolationError",
    "NodeAlreadyExpandedError",
    "UnknownNodeError",
    "IllegalMoveError",
    "ConfigurationError",
]


class TreeMateError(Exception):
    """Base exception for all TreeMate errors.

    Attributes:
        code: Machine-readable error code
        message: Human-readable description
        context: Extra values for debugging
    """
    code: str = "TREEMATE_ERROR"

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            ctx = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"[{self.code}] {self.message} ({ctx})"
        return f"[{self.code}] {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "context": self.context,
        }


# -----------------------------------------------------------------------------
# Engine invariants (fatal)
# -----------------------------------------------------------------------------


class InvariantViolationError(TreeMateError):
    """The search tree is in a state the algorithm can never produce."""
    code: str = "INVARIANT_VIOLATION"


class NodeAlreadyExpandedError(InvariantViolationError):
    code: str = "NODE_ALREADY_EXPANDED"

    def __init__(self, index: int):
        super().__init__(
            "expanding already expanded node", context={"index": index}
        )
        self.index = index


class UnknownNodeError(InvariantViolationError):
    code: str = "UNKNOWN_NODE"

    def __init__(self, index: Any):
        super().__init__("node is not in the tree", context={"index": index})
        self.index = index


# -----------------------------------------------------------------------------
# Game and configuration errors
# -----------------------------------------------------------------------------


class IllegalMoveError(TreeMateError):
    """A move that is not legal in the current position."""
    code: str = "ILLEGAL_MOVE"


class ConfigurationError(TreeMateError):
    code: str = "CONFIGURATION_ERROR"
