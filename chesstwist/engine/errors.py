from __future__ import annotations


class EngineError(Exception):
    """Base class for errors raised by the rules engine."""


class PreconditionError(EngineError, ValueError):
    """A command was called in a state its contract does not allow.

    Game-rule violations are never reported this way (queries answer
    ``False`` instead); this signals a bug in the caller.
    """


class IllegalMoveError(PreconditionError):
    """``apply_move`` was called with a move the oracle rejects."""

    def __init__(self, from_sq: object, to_sq: object) -> None:
        super().__init__(f"illegal move: {from_sq!r} -> {to_sq!r}")
        self.from_sq = from_sq
        self.to_sq = to_sq
