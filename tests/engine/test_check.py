from __future__ import annotations

from chesstwist.engine import rules
from chesstwist.engine.board import Board
from chesstwist.engine.game import Game
from chesstwist.engine.piece import Color, Piece, PieceType
from chesstwist.engine.square import Square


W, B = Color.WHITE, Color.BLACK


def _p(pt: PieceType, color: Color, f: int, r: int) -> Piece:
    return Piece(pt, color, Square(f, r))


FOOLS_MATE = [
    (Square(5, 1), Square(5, 2)),  # f2-f3
    (Square(4, 6), Square(4, 4)),  # e7-e5
    (Square(6, 1), Square(6, 3)),  # g2-g4
    (Square(3, 7), Square(7, 3)),  # d8-h4
]


def test_fools_mate() -> None:
    game = Game.new()
    for fr, to in FOOLS_MATE[:-1]:
        game.apply_move(fr, to)
        assert not game.is_in_check()
    game.apply_move(*FOOLS_MATE[-1])

    assert game.active_color is W
    assert game.is_in_check()
    assert game.checking_square == Square(7, 3)
    assert game.is_game_over()
    assert game.winner() is B
    assert rules.is_checkmate(game.board, W)


def test_check_with_escapes_is_not_mate() -> None:
    game = Game.from_pieces(
        [_p(PieceType.KING, W, 4, 0), _p(PieceType.ROOK, B, 4, 5), _p(PieceType.KING, B, 0, 7)]
    )
    assert game.is_in_check()
    assert game.checking_square == Square(4, 5)
    assert not game.is_game_over()
    assert game.winner() is None
    assert game.legal_destinations(Square(4, 0)) == {
        Square(3, 0),
        Square(5, 0),
        Square(3, 1),
        Square(5, 1),
    }


def test_only_check_resolving_moves_are_legal() -> None:
    game = Game.from_pieces(
        [
            _p(PieceType.KING, W, 4, 0),
            _p(PieceType.ROOK, W, 0, 3),
            _p(PieceType.ROOK, B, 4, 5),
            _p(PieceType.KING, B, 0, 7),
        ]
    )
    assert game.is_legal(Square(0, 3), Square(4, 3))  # block
    assert not game.is_legal(Square(0, 3), Square(0, 4))
    assert not game.is_legal(Square(0, 3), Square(1, 3))


def test_back_rank_mate() -> None:
    game = Game.from_pieces(
        [_p(PieceType.ROOK, W, 0, 7), _p(PieceType.KING, B, 3, 7), _p(PieceType.KING, W, 3, 5)],
        active_color=B,
    )
    assert game.is_game_over()
    assert game.winner() is W


def test_stalemate_is_reported_but_not_game_over() -> None:
    game = Game.from_pieces(
        [_p(PieceType.KING, B, 7, 7), _p(PieceType.KING, W, 5, 5), _p(PieceType.QUEEN, W, 6, 5)],
        active_color=B,
    )
    assert not game.is_in_check()
    assert game.is_stalemate()
    assert not game.is_game_over()
    assert not rules.is_checkmate(game.board, B)


def test_pawn_attacks_diagonally_only() -> None:
    diag = Board.from_pieces([_p(PieceType.KING, B, 4, 4), _p(PieceType.PAWN, W, 3, 3)])
    assert rules.find_checker(diag, B) == Square(3, 3)
    ahead = Board.from_pieces([_p(PieceType.KING, B, 4, 4), _p(PieceType.PAWN, W, 4, 3)])
    assert rules.find_checker(ahead, B) is None


def test_blocked_slider_does_not_give_check() -> None:
    b = Board.from_pieces(
        [_p(PieceType.KING, W, 4, 0), _p(PieceType.PAWN, W, 4, 1), _p(PieceType.ROOK, B, 4, 7)]
    )
    assert not rules.is_king_in_check(b, W)


def test_missing_king_is_never_in_check() -> None:
    b = Board.from_pieces([_p(PieceType.QUEEN, B, 0, 0)])
    assert rules.find_checker(b, W) is None
    assert not rules.is_checkmate(b, W)


def test_checking_square_cleared_once_check_is_resolved() -> None:
    game = Game.from_pieces(
        [_p(PieceType.KING, W, 4, 0), _p(PieceType.ROOK, B, 4, 5), _p(PieceType.KING, B, 0, 7)]
    )
    assert game.checking_square == Square(4, 5)
    game.apply_move(Square(4, 0), Square(3, 0))
    assert game.active_color is B
    assert not game.is_in_check()
    assert game.checking_square is None
