#!/usr/bin/env python3
"""
Time-boxed benchmark over a fixed set of positions.

Each position is sent to a fresh ``python -m interface.uci`` process with
``go movetime N``. The engine's final info line gives the completed depth,
score, node count and speed. With the movetime held constant, compare the
depth column across changes to the search and the NPS column across changes
to evaluation or ordering.

Usage: python3 tools/bench.py [movetime_ms]
"""
import os
import subprocess
import sys
from dataclasses import dataclass

REPO = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
DEFAULT_MOVETIME_MS = 5_000

POSITIONS = [
    ("Start", "startpos"),
    ("1.e4", "startpos moves e2e4"),
    ("Italian", "startpos moves e2e4 e7e5 g1f3 b8c6 f1c4"),
    ("Two knights", "fen r1bqkb1r/pppp1ppp/2n2n2/4p3/2B1P3/5N2/PPPP1PPP/RNBQK2R w KQkq - 4 4"),
    ("Pinned bishops", "fen r2q1rk1/ppp2ppp/2np1n2/2b1p1B1/2B1P1b1/2NP1N2/PPP2PPP/R2Q1RK1 w - - 0 8"),
    ("Hanging queen", "fen 4k3/8/8/3q4/8/8/3R4/4K3 w - - 0 1"),
    ("Back rank", "fen 6k1/5ppp/8/8/8/8/8/R5K1 w - - 0 1"),
    ("Pawn ending", "fen 8/5pk1/6p1/7p/7P/6P1/5PK1/8 w - - 0 1"),
]

COLUMNS = f"{'Position':<15} {'Move':<7} {'Depth':>5} {'Score':>7} {'Nodes':>10} {'NPS':>8} {'ms':>7}"


@dataclass
class BenchResult:
    label: str
    move: str = "(none)"
    depth: int = 0
    score: str = "-"
    nodes: int = 0
    nps: int = 0
    time_ms: int = 0

    def row(self) -> str:
        return (
            f"{self.label:<15} {self.move:<7} {self.depth:>5} {self.score:>7} "
            f"{self.nodes:>10,} {self.nps:>8,} {self.time_ms:>7,}"
        )


def parse_info(line: str, result: BenchResult) -> None:
    """Copy depth, score, nodes, nps and time from an ``info`` line into ``result``."""
    tokens = line.split()
    for key, attr in (("depth", "depth"), ("nodes", "nodes"), ("nps", "nps"), ("time", "time_ms")):
        if key in tokens:
            value = tokens[tokens.index(key) + 1]
            if value.isdigit():
                setattr(result, attr, int(value))

    if "score" in tokens:
        at = tokens.index("score")
        kind, value = tokens[at + 1], tokens[at + 2]
        result.score = f"#{value}" if kind == "mate" else value


def bench_position(label: str, position: str, movetime_ms: int) -> BenchResult:
    engine = subprocess.Popen(
        [sys.executable, "-m", "interface.uci"],
        stdin=subprocess.PIPE,
        stdout=subprocess.PIPE,
        stderr=subprocess.DEVNULL,
        text=True,
        cwd=REPO,
    )
    engine.stdin.write(f"uci\nisready\nposition {position}\ngo movetime {movetime_ms}\n")
    engine.stdin.flush()

    result = BenchResult(label)
    for raw in engine.stdout:
        line = raw.strip()
        if line.startswith("info "):
            parse_info(line, result)
        elif line.startswith("bestmove "):
            result.move = line.split()[1]
            break

    engine.stdin.write("quit\n")
    engine.stdin.flush()
    engine.wait(timeout=5)
    return result


def main() -> None:
    movetime_ms = int(sys.argv[1]) if len(sys.argv) > 1 else DEFAULT_MOVETIME_MS
    print(f"chessbot bench: movetime {movetime_ms} ms, {sys.executable}\n")
    print(COLUMNS)
    print("-" * len(COLUMNS))

    results = []
    for label, position in POSITIONS:
        result = bench_position(label, position, movetime_ms)
        results.append(result)
        print(result.row())

    searched = [r for r in results if r.nodes]
    if not searched:
        return
    print("-" * len(COLUMNS))
    mean_depth = sum(r.depth for r in searched) / len(searched)
    total_nodes = sum(r.nodes for r in searched)
    total_ms = max(1, sum(r.time_ms for r in searched))
    print(f"mean depth {mean_depth:.1f}, {total_nodes:,} nodes, {total_nodes * 1000 // total_ms:,} nps overall")


if __name__ == "__main__":
    main()
