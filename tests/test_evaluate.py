import chess
import pytest

from chessbot.evaluate import _truncating_div, evaluate
from chessbot.tables import TABLES

POSITIONS = [
    "r1bqkb1r/pppp1ppp/2n2n2/4p3/2B1P3/5N2/PPPP1PPP/RNBQK2R w KQkq - 4 4",
    "r2q1rk1/ppp2ppp/2np1n2/2b1p1B1/2B1P1b1/2NP1N2/PPP2PPP/R2Q1RK1 w - - 0 8",
    "8/5pk1/6p1/7p/7P/6P1/5PK1/8 w - - 0 1",
    "8/1p4k1/p7/P1K5/8/8/8/8 b - - 0 1",
]


def test_start_position_is_balanced():
    board = chess.Board()
    assert evaluate(board) == 0
    board.turn = chess.BLACK
    assert evaluate(board) == 0


@pytest.mark.parametrize("fen", POSITIONS)
def test_colour_mirror_symmetry(fen):
    board = chess.Board(fen)
    assert evaluate(board) == evaluate(board.mirror())


@pytest.mark.parametrize("fen", POSITIONS)
def test_side_to_move_flips_sign(fen):
    board = chess.Board(fen)
    flipped = board.copy()
    flipped.turn = not board.turn
    assert evaluate(flipped) == -evaluate(board)


def test_extra_queen_favours_its_side():
    board = chess.Board("3qk3/8/8/8/8/8/8/3QK2Q w - - 0 1")
    assert evaluate(board) > 500
    board.turn = chess.BLACK
    assert evaluate(board) < -500


def test_pure_endgame_uses_endgame_table():
    # Kings cancel out; a lone pawn has phase weight 0.
    board = chess.Board("4k3/8/8/8/4P3/8/8/4K3 w - - 0 1")
    index = 0 * 64 + (chess.E4 ^ 56)
    expected = TABLES.eg_pst[index] + 47 + TABLES.eg_offsets[0]
    assert evaluate(board) == expected


def test_tapered_blend():
    # One knight: phase 1 of 24.
    board = chess.Board("4k3/8/8/8/8/8/8/4K1N1 w - - 0 1")
    index = 1 * 64 + (chess.G1 ^ 56)
    mg = TABLES.mg_pst[index] + 94 + TABLES.mg_offsets[1]
    eg = TABLES.eg_pst[index] + 94 + TABLES.eg_offsets[1]
    assert evaluate(board) == (mg * 1 + eg * 23) // 24


@pytest.mark.parametrize(
    "numerator, expected",
    [(25, 1), (-25, -1), (23, 0), (-23, 0), (-48, -2), (0, 0)],
)
def test_division_truncates_toward_zero(numerator, expected):
    assert _truncating_div(numerator, 24) == expected
