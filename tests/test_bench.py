from tools.bench import BenchResult, parse_info


def test_parse_info_with_centipawns():
    result = BenchResult("x")
    parse_info("info depth 4 score cp -35 nodes 12000 nps 6000 time 2000", result)
    assert (result.depth, result.score, result.nodes, result.nps, result.time_ms) == (4, "-35", 12000, 6000, 2000)


def test_parse_info_with_mate():
    result = BenchResult("x")
    parse_info("info depth 2 score mate 1 nodes 50 nps 500 time 100", result)
    assert result.score == "#1"


def test_parse_info_without_score():
    result = BenchResult("x")
    parse_info("info depth 0 nodes 0 nps 1 time 5", result)
    assert result.score == "-"
    assert result.time_ms == 5
