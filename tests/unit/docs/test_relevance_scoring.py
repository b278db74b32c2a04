from __future__ import annotations

from docs_mcp.docs import FileScore
from docs_mcp.docs.suggest import calculate_path_relevance, rank_scores, score_document


def test_path_relevance_combines_structural_cues() -> None:
    assert calculate_path_relevance("reference/api/getting-started.md", ["api", "missing"]) == 6
    assert calculate_path_relevance("guides/setup.md", ["setup"]) == 4
    assert calculate_path_relevance("misc/notes.md", ["setup"]) == 0


def test_score_document_counts_lines_titles_and_coverage() -> None:
    text = "# Overview title\nsome overview text\nnothing here\n"

    score = score_document("guides/overview.md", text, ["overview"])

    assert score is not None
    assert score.total_matches == 2
    assert score.title_matches == 1
    assert score.keyword_matches == {"overview"}
    assert score.path_relevance == 4
    assert score.final_score(total_keywords=1) == 2 + 3 + 8 + 5 + 10


def test_score_document_counts_each_keyword_per_line() -> None:
    score = score_document("a.md", "alpha beta\nTitle: Alpha\n", ["alpha", "beta", "gamma"])

    assert score is not None
    assert score.total_matches == 3
    assert score.title_matches == 1
    assert score.keyword_matches == {"alpha", "beta"}
    assert len(score.keyword_matches) <= 3
    assert score.final_score(total_keywords=3) == 3 + 3 + 0 + 10


def test_score_document_without_matches_returns_none() -> None:
    assert score_document("a.md", "nothing relevant", ["overview"]) is None


def test_rank_scores_orders_best_first_and_keeps_scan_order_on_ties() -> None:
    scores = [
        FileScore(path="first.md", path_relevance=0, keyword_matches={"x"}, total_matches=1),
        FileScore(path="best.md", path_relevance=5, keyword_matches={"x"}, total_matches=1),
        FileScore(path="second.md", path_relevance=0, keyword_matches={"x"}, total_matches=1),
    ]

    ranked = rank_scores(scores, total_keywords=1)

    assert [score.path for score in ranked] == ["best.md", "first.md", "second.md"]


def test_rank_scores_never_exceeds_ten() -> None:
    scores = [
        FileScore(path=f"{index:02d}.md", path_relevance=0, total_matches=index)
        for index in range(25)
    ]

    assert len(rank_scores(scores, total_keywords=1, limit=50)) == 10
    assert len(rank_scores(scores, total_keywords=1, limit=3)) == 3
