from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Dict, Iterable, List, Optional

from .errors import PreconditionError
from .piece import Color, Piece, PieceType
from .square import BOARD_SIZE, Square


logger = logging.getLogger(__name__)


BACK_RANK = [
    PieceType.ROOK,
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.QUEEN,
    PieceType.KING,
    PieceType.BISHOP,
    PieceType.KNIGHT,
    PieceType.ROOK,
]


def _standard_pieces() -> List[Piece]:
    pieces: List[Piece] = []
    for color in (Color.WHITE, Color.BLACK):
        for file_idx, pt in enumerate(BACK_RANK):
            pieces.append(Piece(pt, color, Square(file_idx, color.home_rank)))
        for file_idx in range(BOARD_SIZE):
            pieces.append(Piece(PieceType.PAWN, color, Square(file_idx, color.pawn_rank)))
    return pieces


@dataclass
class Board:
    """Authoritative game state: piece placement, side to move, check flags.

    Notes:
    - ``squares`` owns the placement; a square maps to at most one piece.
    - ``active_color`` is only flipped by :meth:`make_move`.
    - ``in_check``, ``checking_square`` and ``game_over`` are derived; they
      are refreshed by the game after every committed action.
    """

    squares: Dict[Square, Piece] = field(default_factory=dict)
    active_color: Color = Color.WHITE
    in_check: bool = False
    checking_square: Optional[Square] = None
    game_over: bool = False

    @classmethod
    def startpos(cls) -> "Board":
        """Create a board set up in the standard starting position."""
        board = cls()
        board.reset()
        return board

    @classmethod
    def from_pieces(cls, pieces: Iterable[Piece], active_color: Color = Color.WHITE) -> "Board":
        """Create a board holding exactly ``pieces``.

        Args:
            pieces (Iterable[Piece]): Pieces to place; each keeps its own square.
            active_color (Color): Side to move.

        Returns:
            Board: New board with cleared status flags.

        Raises:
            ValueError: If two pieces share a square.
        """
        board = cls(active_color=active_color)
        for piece in pieces:
            if piece.square in board.squares:
                raise ValueError(f"two pieces on {piece.square!r}")
            board.squares[piece.square] = piece
        return board

    def reset(self) -> None:
        """Rebuild the standard 32-piece layout with White to move."""
        self.squares = {p.square: p for p in _standard_pieces()}
        self.active_color = Color.WHITE
        self.clear_status()

    def clear_status(self) -> None:
        self.in_check = False
        self.checking_square = None
        self.game_over = False

    # --- Queries ---
    def piece_at(self, square: Square) -> Optional[Piece]:
        return self.squares.get(square)

    def is_empty(self, square: Square) -> bool:
        return square not in self.squares

    def pieces(self, color: Optional[Color] = None) -> List[Piece]:
        """Return the live pieces, optionally only those of ``color``."""
        if color is None:
            return list(self.squares.values())
        return [p for p in self.squares.values() if p.color is color]

    def king_square(self, color: Color) -> Optional[Square]:
        for piece in self.squares.values():
            if piece.piece_type is PieceType.KING and piece.color is color:
                return piece.square
        return None

    def copy(self) -> "Board":
        """Return an independent board; pieces are immutable so a shallow map copy suffices."""
        return replace(self, squares=dict(self.squares))

    # --- Low-level placement (simulations and setup) ---
    def place(self, piece: Piece) -> None:
        self.squares[piece.square] = piece

    def remove(self, square: Square) -> Optional[Piece]:
        return self.squares.pop(square, None)

    # --- Move application ---
    def make_move(self, from_sq: Square, to_sq: Square) -> Optional[Piece]:
        """Commit a move in-place and hand the turn to the other side.

        The move is not validated here; callers check legality first.
        Castling (king moving two files) also relocates the corner rook.

        Args:
            from_sq (Square): Origin of the moving piece.
            to_sq (Square): Destination square.

        Returns:
            Optional[Piece]: The captured piece, if any.

        Raises:
            PreconditionError: If ``from_sq`` is empty, or a castling move
                finds no rook in the corner.
        """
        mover = self.squares.get(from_sq)
        if mover is None:
            raise PreconditionError(f"no piece to move on {from_sq!r}")

        if mover.piece_type is PieceType.KING and abs(to_sq.file - from_sq.file) == 2:
            kingside = to_sq.file > from_sq.file
            rook_from = Square(BOARD_SIZE - 1 if kingside else 0, from_sq.rank)
            rook_to = Square(to_sq.file - 1 if kingside else to_sq.file + 1, from_sq.rank)
            rook = self.squares.pop(rook_from, None)
            if rook is None:
                raise PreconditionError(f"castling without a rook on {rook_from!r}")
            self.squares[rook_to] = rook.moved_to(rook_to)

        captured = self.squares.pop(to_sq, None)
        del self.squares[from_sq]
        self.squares[to_sq] = mover.moved_to(to_sq)
        self.active_color = self.active_color.opponent
        logger.debug("moved %s %r -> %r", mover.piece_type.value, from_sq, to_sq)
        return captured

    def replace_piece(self, square: Square, piece_type: PieceType) -> Piece:
        """Swap the piece on ``square`` for a fresh one of ``piece_type``, same colour.

        Raises:
            PreconditionError: If ``square`` is empty.
        """
        old = self.squares.get(square)
        if old is None:
            raise PreconditionError(f"no piece on {square!r}")
        new = Piece(piece_type, old.color, square, has_moved=True)
        self.squares[square] = new
        return new

    # --- Dunder helpers ---
    def __len__(self) -> int:
        return len(self.squares)

    def __str__(self) -> str:
        rows: List[str] = []
        for rank in range(BOARD_SIZE - 1, -1, -1):
            row = []
            for file_idx in range(BOARD_SIZE):
                p = self.squares.get(Square(file_idx, rank))
                row.append(p.letter if p else ".")
            rows.append(f"{rank} {' '.join(row)}")
        rows.append("  " + " ".join(str(f) for f in range(BOARD_SIZE)))
        return "\n".join(rows)
