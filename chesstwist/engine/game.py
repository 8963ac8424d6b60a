from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Set, Tuple

from . import rules
from .board import Board
from .errors import IllegalMoveError, PreconditionError
from .piece import PROMOTION_TYPES, Color, Piece, PieceType
from .square import Square


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Action:
    """A committed command.

    Attributes:
        kind (str): ``"move"`` or ``"promotion"``.
        from_sq (Square): Origin of the move, or the promoted square.
        to_sq (Square): Destination of the move, or the promoted square.
        piece_type (Optional[PieceType]): New piece type for promotions.
    """

    kind: str
    from_sq: Square
    to_sq: Square
    piece_type: Optional[PieceType] = None


@dataclass
class Game:
    """Game wrapper around a board: the API a presentation layer talks to.

    Responsibility: answer legality queries, commit moves and promotions,
    keep the check/checkmate flags current, and remember enough to undo.
    Game over is reported but not enforced; callers stop submitting moves.
    """

    board: Board = field(default_factory=Board.startpos)
    history: List[Action] = field(default_factory=list)
    pending_promotion: Optional[Square] = None
    _snapshots: List[Tuple[Board, Optional[Square]]] = field(default_factory=list, repr=False)

    @classmethod
    def new(cls) -> "Game":
        return cls()

    @classmethod
    def from_pieces(cls, pieces: Iterable[Piece], active_color: Color = Color.WHITE) -> "Game":
        """Start a game from a custom position; status flags are computed immediately."""
        game = cls(board=Board.from_pieces(pieces, active_color))
        game._refresh_status()
        return game

    # --- Queries ---
    def piece_at(self, square: Square) -> Optional[Piece]:
        return self.board.piece_at(square)

    def pieces(self) -> List[Piece]:
        return self.board.pieces()

    @property
    def active_color(self) -> Color:
        return self.board.active_color

    @property
    def checking_square(self) -> Optional[Square]:
        return self.board.checking_square

    def is_in_check(self) -> bool:
        return self.board.in_check

    def is_game_over(self) -> bool:
        return self.board.game_over

    def winner(self) -> Optional[Color]:
        """Side that delivered checkmate, or None while the game is running."""
        if not self.board.game_over:
            return None
        return self.board.active_color.opponent

    def is_stalemate(self) -> bool:
        return rules.is_stalemate(self.board, self.board.active_color)

    def is_legal(self, from_sq: Square, to_sq: Square) -> bool:
        return rules.is_legal(self.board, from_sq, to_sq)

    def legal_destinations(self, square: Square) -> Set[Square]:
        return rules.legal_destinations(self.board, square)

    def is_promotion(self, from_sq: Square, to_sq: Square) -> bool:
        """Whether this move brings a pawn to its last rank and needs a :meth:`promote` call."""
        return rules.is_promotion(self.board, from_sq, to_sq)

    # --- Commands ---
    def apply_move(self, from_sq: Square, to_sq: Square) -> None:
        """Commit a legal move and refresh check/checkmate for the side now to move.

        Raises:
            IllegalMoveError: If :meth:`is_legal` rejects the move.
        """
        if not rules.is_legal(self.board, from_sq, to_sq):
            raise IllegalMoveError(from_sq, to_sq)
        promotes = rules.is_promotion(self.board, from_sq, to_sq)
        self._snapshots.append((self.board.copy(), self.pending_promotion))
        captured = self.board.make_move(from_sq, to_sq)
        if captured is not None:
            logger.debug("captured %s on %r", captured.piece_type.value, to_sq)
        self.pending_promotion = to_sq if promotes else None
        self.history.append(Action("move", from_sq, to_sq))
        self._refresh_status()

    def promote(self, square: Square, piece_type: PieceType) -> None:
        """Replace the pawn that just reached its last rank.

        The side that moved the pawn is the opponent of the active colour;
        the active colour does not change.

        Args:
            square (Square): Square of the pawn to promote.
            piece_type (PieceType): One of queen, rook, bishop, knight.

        Raises:
            PreconditionError: If ``square`` does not hold a pawn of the side
                that just moved on its promotion rank, or ``piece_type`` is
                not a promotion type.
        """
        if piece_type not in PROMOTION_TYPES:
            raise PreconditionError(f"cannot promote to {piece_type.value}")
        mover = self.board.active_color.opponent
        piece = self.board.piece_at(square)
        if piece is None or piece.piece_type is not PieceType.PAWN or piece.color is not mover:
            raise PreconditionError(f"no {mover.value} pawn to promote on {square!r}")
        if square.rank != mover.promotion_rank:
            raise PreconditionError(f"pawn on {square!r} has not reached its last rank")

        self._snapshots.append((self.board.copy(), self.pending_promotion))
        self.board.replace_piece(square, piece_type)
        self.pending_promotion = None
        self.history.append(Action("promotion", square, square, piece_type))
        logger.debug("promoted %s pawn on %r to %s", mover.value, square, piece_type.value)
        self._refresh_status()

    def reset(self) -> None:
        self.board.reset()
        self.history.clear()
        self._snapshots.clear()
        self.pending_promotion = None
        logger.debug("game reset")

    def undo(self) -> None:
        """Restore the position before the last committed move or promotion.

        Raises:
            PreconditionError: If nothing has been committed since the last reset.
        """
        if not self._snapshots:
            raise PreconditionError("no moves to undo")
        self.board, self.pending_promotion = self._snapshots.pop()
        self.history.pop()

    def _refresh_status(self) -> None:
        board = self.board
        board.checking_square = None
        board.checking_square = rules.find_checker(board, board.active_color)
        board.in_check = board.checking_square is not None
        board.game_over = board.in_check and rules.is_checkmate(board, board.active_color)
        if board.game_over:
            logger.info("checkmate, %s wins", board.active_color.opponent.value)
