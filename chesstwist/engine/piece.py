from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum

from .square import Square


class Color(Enum):
    WHITE = "white"
    BLACK = "black"

    @property
    def opponent(self) -> "Color":
        return Color.BLACK if self is Color.WHITE else Color.WHITE

    @property
    def forward(self) -> int:
        """Rank direction pawns of this colour advance in."""
        return 1 if self is Color.WHITE else -1

    @property
    def home_rank(self) -> int:
        return 0 if self is Color.WHITE else 7

    @property
    def pawn_rank(self) -> int:
        """Starting rank of this colour's pawns (double steps start here)."""
        return 1 if self is Color.WHITE else 6

    @property
    def promotion_rank(self) -> int:
        return 7 if self is Color.WHITE else 0


class PieceType(Enum):
    KING = "king"
    QUEEN = "queen"
    ROOK = "rook"
    BISHOP = "bishop"
    KNIGHT = "knight"
    PAWN = "pawn"


PROMOTION_TYPES = (PieceType.QUEEN, PieceType.ROOK, PieceType.BISHOP, PieceType.KNIGHT)

# Letters used by the board diagram only (upper case = white)
PIECE_LETTERS = {
    PieceType.KING: "k",
    PieceType.QUEEN: "q",
    PieceType.ROOK: "r",
    PieceType.BISHOP: "b",
    PieceType.KNIGHT: "n",
    PieceType.PAWN: "p",
}


@dataclass(frozen=True)
class Piece:
    """A piece standing on the board.

    Attributes:
        piece_type (PieceType): Kind of piece.
        color (Color): Owner.
        square (Square): Square the piece stands on.
        has_moved (bool): Whether the piece was ever moved; gates castling.
    """

    piece_type: PieceType
    color: Color
    square: Square
    has_moved: bool = False

    def moved_to(self, square: Square) -> "Piece":
        """Return this piece relocated to ``square`` and marked as moved."""
        return replace(self, square=square, has_moved=True)

    @property
    def letter(self) -> str:
        ch = PIECE_LETTERS[self.piece_type]
        return ch.upper() if self.color is Color.WHITE else ch
