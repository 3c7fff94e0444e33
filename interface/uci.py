"""
UCI (Universal Chess Interface) protocol handler.

UCI is the standard text-based protocol that allows chess GUIs and testing
tools (like cutechess-cli) to communicate with chess engines. The engine
reads commands from stdin and writes responses to stdout. All output lines
must be flushed immediately.

Protocol overview:
    GUI → Engine: uci, isready, ucinewgame, position, go, stop, quit
    Engine → GUI: id name, id author, uciok, readyok, info, bestmove

Threading model:
    The UCI loop runs on the main thread and must never block on the search.
    On "go" the handler starts one daemon thread that calls
    Searcher.choose_move(). The search itself is single-threaded; "stop" sets
    the clock's stop_event, which the search notices at its next move boundary.

Usage:
    python -m interface.uci

Critical rule: NEVER print to stdout except for valid UCI responses.
Logging goes to stderr.
"""

import logging
import os
import sys
import threading
import time

import chess

from chessbot.clock import TurnClock
from chessbot.constants import MATE_THRESHOLD, MAX_VAL
from chessbot.search import Searcher, SearchStats

_log = logging.getLogger(__name__)

# Game time assumed for "go infinite": long enough that only "stop" ends the search.
_INFINITE_GAME_MS = 10_000_000 * 30


def _send(line: str) -> None:
    """Write a line to stdout and flush immediately."""
    print(line, flush=True)


def format_score(score: int) -> str:
    """
    UCI score token for a side-to-move score.

    Mate scores are MAX_VAL - p when the opponent is mated p plies below the
    searched child, i.e. after p + 1 plies from the root.
    """
    if score >= MATE_THRESHOLD:
        plies = MAX_VAL - score + 1
        return f"mate {(plies + 1) // 2}"
    if score <= -MATE_THRESHOLD:
        plies = MAX_VAL + score + 1
        return f"mate -{(plies + 1) // 2}"
    return f"cp {score}"


def info_line(stats: SearchStats, elapsed_ms: int) -> str:
    """
    Final "info" line for a finished search.

    The score token is left out when no root move was scored, since there is
    no score to report.
    """
    elapsed_ms = max(1, elapsed_ms)
    nps = max(1, stats.nodes * 1000 // elapsed_ms)
    parts = [f"info depth {stats.depth}"]
    if stats.score is not None:
        parts.append(f"score {format_score(stats.score)}")
    parts.append(f"nodes {stats.nodes} nps {nps} time {elapsed_ms}")
    return " ".join(parts)


class UciHandler:
    """
    Stateful handler for the UCI protocol.

    Attributes:
        board:         The current position, updated by "position" commands.
        searcher:      The agent; owns the transposition table for one game.
        search_thread: The active search thread, or None.
        stop_event:    Shared with the running search's clock.
    """

    def __init__(self) -> None:
        self.board: chess.Board = chess.Board()
        self.searcher: Searcher = Searcher()
        self.search_thread: threading.Thread | None = None
        self.stop_event: threading.Event = threading.Event()

    # -----------------------------------------------------------------------
    # Command handlers
    # -----------------------------------------------------------------------

    def handle_uci(self) -> None:
        _send("id name chessbot")
        _send("id author chessbot developers")
        _send("uciok")

    def handle_isready(self) -> None:
        _send("readyok")

    def handle_ucinewgame(self) -> None:
        """Stop any search, reset the board and empty the transposition table."""
        self._stop_search()
        self.board = chess.Board()
        self.searcher.tt.clear()

    def handle_position(self, tokens: list[str]) -> None:
        """
        Parse and apply a "position" command.

        Command formats:
            position startpos [moves e2e4 e7e5 ...]
            position fen <FEN> [moves e2e4 e7e5 ...]

        Replaying the moves (rather than loading only the final FEN) keeps the
        move stack, which repetition detection needs.
        """
        try:
            if not tokens:
                return

            if tokens[0] == "startpos":
                board = chess.Board()
                move_tokens = tokens[2:] if len(tokens) > 1 and tokens[1] == "moves" else []
            elif tokens[0] == "fen":
                if "moves" in tokens:
                    moves_idx = tokens.index("moves")
                    fen = " ".join(tokens[1:moves_idx])
                    move_tokens = tokens[moves_idx + 1:]
                else:
                    fen = " ".join(tokens[1:])
                    move_tokens = []
                board = chess.Board(fen)
            else:
                _log.warning("unknown position type: %s", tokens[0])
                return

            for uci_move in move_tokens:
                move = chess.Move.from_uci(uci_move)
                if move not in board.legal_moves:
                    _log.warning("illegal move in position command: %s", uci_move)
                    break
                board.push(move)

            self.board = board

        except ValueError as e:
            _log.error("error in position command: %s", e)

    def handle_go(self, tokens: list[str]) -> None:
        """
        Parse a "go" command and start the search in a background thread.

        The search works on a copy of the board, so a "position" command that
        arrives mid-search cannot race with it.
        """
        self._stop_search()

        self.stop_event = threading.Event()
        clock = self._make_clock(tokens, self.stop_event)
        board_copy = self.board.copy()
        searcher = self.searcher

        def search_and_reply() -> None:
            if board_copy.is_game_over():
                _send("bestmove (none)")
                return
            try:
                start = time.monotonic()
                move = searcher.choose_move(board_copy, clock)
                elapsed_ms = int((time.monotonic() - start) * 1000)
                _send(info_line(searcher.stats, elapsed_ms))
                _send(f"bestmove {move.uci()}")
            except Exception:
                _log.exception("search failed for fen %s", board_copy.fen())
                _send("bestmove (none)")

        self.search_thread = threading.Thread(target=search_and_reply, daemon=True)
        self.search_thread.start()

    def handle_stop(self) -> None:
        self._stop_search()

    def handle_quit(self) -> None:
        self._stop_search()
        sys.exit(0)

    # -----------------------------------------------------------------------
    # Internal helpers
    # -----------------------------------------------------------------------

    def _stop_search(self) -> None:
        """Signal the running search to stop and wait (up to 2s) for its bestmove."""
        self.stop_event.set()
        if self.search_thread is not None and self.search_thread.is_alive():
            self.search_thread.join(timeout=2.0)
        self.search_thread = None

    def _make_clock(self, tokens: list[str], stop_event: threading.Event) -> TurnClock:
        """
        Build the turn clock from "go" command tokens.

        Supports:
            movetime <ms>                     per-turn budget of about <ms>
            wtime <ms> btime <ms> [winc binc] the side's game clock (plus increment);
                                              the search spends 1/30 of it
        Anything else ("go infinite") searches until "stop".
        """
        params: dict[str, int] = {}
        i = 0
        while i < len(tokens) - 1:
            key = tokens[i]
            try:
                params[key] = int(tokens[i + 1])
                i += 2
            except ValueError:
                i += 1

        if "movetime" in params:
            return TurnClock.for_move_time(params["movetime"], stop_event)

        color = self.board.turn
        time_key = "wtime" if color == chess.WHITE else "btime"
        inc_key = "winc" if color == chess.WHITE else "binc"

        if time_key in params:
            game_ms = max(1, params[time_key] + params.get(inc_key, 0))
            return TurnClock(game_remaining_ms=game_ms, stop_event=stop_event)

        return TurnClock(game_remaining_ms=_INFINITE_GAME_MS, stop_event=stop_event)


def dispatch(handler: UciHandler, line: str) -> None:
    """Route one input line to the matching handler method."""
    tokens = line.split()
    if not tokens:
        return
    command, args = tokens[0], tokens[1:]

    if command == "uci":
        handler.handle_uci()
    elif command == "isready":
        handler.handle_isready()
    elif command == "ucinewgame":
        handler.handle_ucinewgame()
    elif command == "position":
        handler.handle_position(args)
    elif command == "go":
        handler.handle_go(args)
    elif command == "stop":
        handler.handle_stop()
    elif command == "quit":
        handler.handle_quit()
    else:
        # Engines must ignore unknown commands.
        _log.debug("ignoring unknown command: %r", command)


def run_uci_loop() -> None:
    """
    Main UCI protocol loop. Runs until "quit" or end of stdin.

    A failure in one command is logged and the loop continues; a crashed
    engine loses the game.
    """
    logging.basicConfig(
        stream=sys.stderr,
        level=os.environ.get("CHESSBOT_LOG_LEVEL", "WARNING").upper(),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    handler = UciHandler()

    for raw_line in sys.stdin:
        line = raw_line.strip()
        try:
            dispatch(handler, line)
        except Exception:
            _log.exception("unhandled error for command %r", line)

    handler._stop_search()


if __name__ == "__main__":
    run_uci_loop()
