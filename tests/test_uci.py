import logging

import chess
import pytest

from chessbot.constants import MAX_VAL, MIN_VAL
from chessbot.search import Searcher
from chessbot.transposition import EMPTY_ENTRY, TTFlag
from interface.uci import UciHandler, dispatch, format_score, info_line


@pytest.fixture
def handler():
    h = UciHandler()
    yield h
    h._stop_search()


def _wait(handler):
    handler.search_thread.join(timeout=30)
    assert not handler.search_thread.is_alive()


@pytest.mark.parametrize(
    "score, token",
    [
        (35, "cp 35"),
        (-120, "cp -120"),
        (MAX_VAL, "mate 1"),          # opponent mated right after our move
        (MAX_VAL - 2, "mate 2"),
        (MIN_VAL + 1, "mate -1"),     # we are mated right after their reply
        (MIN_VAL + 3, "mate -2"),
    ],
)
def test_format_score(score, token):
    assert format_score(score) == token


def test_uci_handshake(handler, capsys):
    dispatch(handler, "uci")
    dispatch(handler, "isready")
    out = capsys.readouterr().out.splitlines()
    assert out[0] == "id name chessbot"
    assert out[-2:] == ["uciok", "readyok"]


def test_position_startpos_with_moves(handler):
    dispatch(handler, "position startpos moves e2e4 e7e5 g1f3")
    expected = chess.Board()
    for uci in ("e2e4", "e7e5", "g1f3"):
        expected.push_uci(uci)
    assert handler.board == expected
    assert len(handler.board.move_stack) == 3


def test_position_fen(handler):
    fen = "6k1/5ppp/8/8/8/8/8/R5K1 w - - 0 1"
    dispatch(handler, f"position fen {fen} moves a1a7")
    assert handler.board.piece_at(chess.A7) == chess.Piece(chess.ROOK, chess.WHITE)


def test_illegal_move_stops_replay(handler):
    dispatch(handler, "position startpos moves e2e4 e2e4 d7d5")
    assert [m.uci() for m in handler.board.move_stack] == ["e2e4"]


def test_bad_fen_keeps_previous_position(handler):
    dispatch(handler, "position startpos moves e2e4")
    dispatch(handler, "position fen not/a/fen")
    assert len(handler.board.move_stack) == 1


def test_go_movetime_plays_mate(handler, capsys):
    dispatch(handler, "position fen 6k1/5ppp/8/8/8/8/8/R5K1 w - - 0 1")
    dispatch(handler, "go movetime 300")
    _wait(handler)
    out = capsys.readouterr().out.splitlines()
    assert out[-1] == "bestmove a1a8"
    assert out[-2].startswith("info depth ")
    assert "score mate 1" in out[-2]


def test_go_on_finished_game(handler, capsys):
    dispatch(handler, "position fen R5k1/5ppp/8/8/8/8/8/6K1 b - - 0 1")
    dispatch(handler, "go movetime 100")
    _wait(handler)
    assert capsys.readouterr().out.splitlines()[-1] == "bestmove (none)"


def test_stop_ends_infinite_search(handler, capsys):
    dispatch(handler, "position startpos")
    dispatch(handler, "go infinite")
    dispatch(handler, "stop")
    assert handler.search_thread is None
    line = capsys.readouterr().out.splitlines()[-1]
    move = chess.Move.from_uci(line.split()[1])
    assert move in chess.Board().legal_moves


def test_clock_from_game_time(handler):
    clock = handler._make_clock(["wtime", "60000", "btime", "1000", "winc", "500"], handler.stop_event)
    assert clock.game_remaining_ms == 60_500
    handler.board.turn = chess.BLACK
    clock = handler._make_clock(["wtime", "60000", "btime", "1000"], handler.stop_event)
    assert clock.game_remaining_ms == 1_000


def test_ucinewgame_empties_table(handler):
    searcher = handler.searcher
    searcher.tt.store(12345, 4, 50, TTFlag.EXACT)
    dispatch(handler, "position startpos moves e2e4")
    dispatch(handler, "ucinewgame")
    assert handler.searcher is searcher
    assert searcher.tt.entry(12345) == EMPTY_ENTRY
    assert handler.board == chess.Board()


def test_unknown_command_is_ignored(handler, capsys):
    dispatch(handler, "xyzzy 1 2 3")
    dispatch(handler, "")
    assert capsys.readouterr().out == ""


def test_info_line_with_score(fake_clock, back_rank_mate):
    searcher = Searcher(tt_entries=1 << 16)
    searcher.choose_move(back_rank_mate, fake_clock(), max_depth=1)
    line = info_line(searcher.stats, 0)
    assert line.startswith("info depth 1 score mate 1 nodes ")
    assert line.endswith(" time 1")


def test_info_line_omits_score_when_nothing_was_scored(fake_clock):
    searcher = Searcher(tt_entries=1 << 16)
    move = searcher.choose_move(chess.Board(), fake_clock(checks_allowed=0))
    assert move in chess.Board().legal_moves
    line = info_line(searcher.stats, 5)
    assert "score" not in line
    assert "mate" not in line
    assert line == "info depth 0 nodes 0 nps 1 time 5"


def test_go_out_of_time_reports_no_score(handler, capsys, fake_clock, monkeypatch):
    monkeypatch.setattr(handler, "_make_clock", lambda tokens, stop_event: fake_clock(checks_allowed=0))
    dispatch(handler, "position startpos")
    dispatch(handler, "go movetime 1000")
    _wait(handler)
    out = capsys.readouterr().out.splitlines()
    assert out[-2].startswith("info depth 0 nodes 0 ")
    assert "score" not in out[-2]
    assert chess.Move.from_uci(out[-1].split()[1]) in chess.Board().legal_moves


def test_unknown_command_logged_on_uci_logger(handler, caplog):
    caplog.set_level(logging.DEBUG, logger="interface.uci")
    dispatch(handler, "xyzzy")
    assert any(r.name == "interface.uci" and "xyzzy" in r.getMessage() for r in caplog.records)
