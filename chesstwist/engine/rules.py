from __future__ import annotations

from dataclasses import replace
from typing import Callable, Dict, Optional, Set

from .board import Board
from .piece import Color, Piece, PieceType
from .square import BOARD_SIZE, Square, all_squares, squares_between


# --- Movement patterns ---
#
# Each pattern answers "can ``piece`` reach ``to_sq`` by its own movement
# rule on this board", including path blocking and pawn capture rules, but
# not own-king safety. They never call back into check detection, so the
# detector can use them to test attacks without recursing.


def _path_clear(board: Board, a: Square, b: Square) -> bool:
    return all(board.is_empty(s) for s in squares_between(a, b))


def _pawn_pattern(board: Board, piece: Piece, to_sq: Square) -> bool:
    fr = piece.square
    step = piece.color.forward
    df = to_sq.file - fr.file
    dr = to_sq.rank - fr.rank

    if df == 0 and dr == step:
        return board.is_empty(to_sq)
    if df == 0 and dr == 2 * step and fr.rank == piece.color.pawn_rank:
        return board.is_empty(to_sq) and board.is_empty(Square(fr.file, fr.rank + step))
    if abs(df) == 1 and dr == step:
        target = board.piece_at(to_sq)
        return target is not None and target.color is not piece.color
    return False


def _rook_pattern(board: Board, piece: Piece, to_sq: Square) -> bool:
    fr = piece.square
    if fr == to_sq or (fr.file != to_sq.file and fr.rank != to_sq.rank):
        return False
    return _path_clear(board, fr, to_sq)


def _bishop_pattern(board: Board, piece: Piece, to_sq: Square) -> bool:
    fr = piece.square
    df = abs(to_sq.file - fr.file)
    if df == 0 or df != abs(to_sq.rank - fr.rank):
        return False
    return _path_clear(board, fr, to_sq)


def _queen_pattern(board: Board, piece: Piece, to_sq: Square) -> bool:
    return _rook_pattern(board, piece, to_sq) or _bishop_pattern(board, piece, to_sq)


def _knight_pattern(board: Board, piece: Piece, to_sq: Square) -> bool:
    df = abs(to_sq.file - piece.square.file)
    dr = abs(to_sq.rank - piece.square.rank)
    return (df, dr) in ((1, 2), (2, 1))


def _king_step(board: Board, piece: Piece, to_sq: Square) -> bool:
    df = abs(to_sq.file - piece.square.file)
    dr = abs(to_sq.rank - piece.square.rank)
    return max(df, dr) == 1


_PATTERNS: Dict[PieceType, Callable[[Board, Piece, Square], bool]] = {
    PieceType.PAWN: _pawn_pattern,
    PieceType.ROOK: _rook_pattern,
    PieceType.KNIGHT: _knight_pattern,
    PieceType.BISHOP: _bishop_pattern,
    PieceType.QUEEN: _queen_pattern,
    PieceType.KING: _king_step,
}


def attacks(board: Board, from_sq: Square, to_sq: Square) -> bool:
    """Return True if the piece on ``from_sq`` attacks ``to_sq``.

    Raw pattern plus path blocking only. Castling is not an attack and the
    attacker's own king safety is ignored.
    """
    piece = board.piece_at(from_sq)
    if piece is None:
        return False
    return _PATTERNS[piece.piece_type](board, piece, to_sq)


# --- Check detection ---


def find_checker(board: Board, color: Color) -> Optional[Square]:
    """Return the square of the first opposing piece attacking ``color``'s king.

    Returns None when the king is not attacked, or when ``color`` has no
    king on the board.
    """
    king_sq = board.king_square(color)
    if king_sq is None:
        return None
    for piece in board.pieces(color.opponent):
        if attacks(board, piece.square, king_sq):
            return piece.square
    return None


def is_king_in_check(board: Board, color: Color) -> bool:
    return find_checker(board, color) is not None


# --- Castling ---


def _is_castling_attempt(king: Piece, to_sq: Square) -> bool:
    return (
        not king.has_moved
        and to_sq.rank == king.square.rank
        and abs(to_sq.file - king.square.file) == 2
    )


def _castling_allowed(board: Board, king: Piece, to_sq: Square) -> bool:
    kingside = to_sq.file > king.square.file
    rank = king.square.rank
    rook_sq = Square(BOARD_SIZE - 1 if kingside else 0, rank)
    rook = board.piece_at(rook_sq)
    if (
        rook is None
        or rook.piece_type is not PieceType.ROOK
        or rook.color is not king.color
        or rook.has_moved
    ):
        return False
    if not _path_clear(board, king.square, rook_sq):
        return False
    if is_king_in_check(board, king.color):
        return False

    # The square the king crosses must not be attacked either. Only the
    # king is relocated; the rook's own transit square is not examined.
    crossed = Square(king.square.file + (1 if kingside else -1), rank)
    scratch = board.copy()
    scratch.remove(king.square)
    scratch.place(replace(king, square=crossed))
    return not is_king_in_check(scratch, king.color)


def pattern_allows(board: Board, from_sq: Square, to_sq: Square) -> bool:
    """Return True if the piece on ``from_sq`` may move to ``to_sq`` by its movement rule.

    Includes castling preconditions for the king. Does not check whose turn
    it is, self-capture, or whether the mover's king ends up attacked.
    """
    piece = board.piece_at(from_sq)
    if piece is None:
        return False
    if piece.piece_type is PieceType.KING and _is_castling_attempt(piece, to_sq):
        return _castling_allowed(board, piece, to_sq)
    return _PATTERNS[piece.piece_type](board, piece, to_sq)


# --- Legality ---


def _simulate(board: Board, from_sq: Square, to_sq: Square) -> Board:
    scratch = board.copy()
    mover = scratch.remove(from_sq)
    assert mover is not None
    scratch.remove(to_sq)
    scratch.place(replace(mover, square=to_sq))
    return scratch


def _is_legal_for(board: Board, color: Color, from_sq: Square, to_sq: Square) -> bool:
    piece = board.piece_at(from_sq)
    if piece is None or piece.color is not color:
        return False
    target = board.piece_at(to_sq)
    if target is not None and target.color is color:
        return False
    if not pattern_allows(board, from_sq, to_sq):
        return False
    return not is_king_in_check(_simulate(board, from_sq, to_sq), color)


def is_legal(board: Board, from_sq: Square, to_sq: Square) -> bool:
    """Decide whether the side to move may play ``from_sq`` -> ``to_sq``.

    Checks, in order: a piece of the active colour stands on ``from_sq``;
    ``to_sq`` does not hold a piece of the same colour; the piece's movement
    pattern allows the move; and the mover's king is not attacked once the
    move is played. The last check runs on a scratch copy, so ``board`` is
    never modified.

    Args:
        board (Board): Position to query.
        from_sq (Square): Origin square.
        to_sq (Square): Destination square.

    Returns:
        bool: True if the move is legal.
    """
    return _is_legal_for(board, board.active_color, from_sq, to_sq)


def legal_destinations(board: Board, square: Square) -> Set[Square]:
    """Return every square the piece on ``square`` may legally move to."""
    return {to_sq for to_sq in all_squares() if is_legal(board, square, to_sq)}


def has_legal_move(board: Board, color: Color) -> bool:
    for piece in board.pieces(color):
        for to_sq in all_squares():
            if _is_legal_for(board, color, piece.square, to_sq):
                return True
    return False


def is_checkmate(board: Board, color: Color) -> bool:
    """Return True if ``color`` is in check and has no legal move.

    Exhaustive: every piece of ``color`` is tried against all 64 squares.
    """
    if not is_king_in_check(board, color):
        return False
    return not has_legal_move(board, color)


def is_stalemate(board: Board, color: Color) -> bool:
    if is_king_in_check(board, color):
        return False
    return not has_legal_move(board, color)


def is_promotion(board: Board, from_sq: Square, to_sq: Square) -> bool:
    """Return True if moving ``from_sq`` -> ``to_sq`` takes a pawn to its last rank."""
    piece = board.piece_at(from_sq)
    return (
        piece is not None
        and piece.piece_type is PieceType.PAWN
        and to_sq.rank == piece.color.promotion_rank
    )
