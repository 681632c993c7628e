import pytest

from ranobe.widgets.matcher import (
    Candidate,
    as_candidates,
    filter_candidates,
    fuzzy_match,
)


def _is_subsequence(query: str, text: str) -> bool:
    it = iter(text.lower())
    return all(ch in it for ch in query.lower())


@pytest.fixture
def candidates(flavors):
    return as_candidates(flavors)


def test_empty_query_keeps_original_order_with_uniform_score(candidates, flavors) -> None:
    results = filter_candidates("", candidates)

    assert [r.label for r in results] == flavors
    assert [r.index for r in results] == [0, 1, 2, 3]
    assert {r.score for r in results} == {0}


def test_ice_ranks_ice_cream_first(candidates) -> None:
    results = filter_candidates("ice", candidates)

    assert results[0].label == "Ice Cream"
    assert results[0].positions == frozenset({0, 1, 2})


@pytest.mark.parametrize("query", ["c", "ch", "ice", "ca", "sw", "mu", "pile", "zz", "a c"])
def test_filter_keeps_exactly_the_subsequence_matches(candidates, flavors, query) -> None:
    results = filter_candidates(query, candidates)

    expected = {label for label in flavors if _is_subsequence(query, label)}
    assert {r.label for r in results} == expected


@pytest.mark.parametrize("query", ["c", "a", "e", "ca", "sw"])
def test_results_sorted_by_descending_score(candidates, query) -> None:
    scores = [r.score for r in filter_candidates(query, candidates)]
    assert scores == sorted(scores, reverse=True)


def test_equal_scores_keep_collection_order() -> None:
    results = filter_candidates("ab", as_candidates(["xab", "ab", "zab"]))

    assert [r.label for r in results] == ["ab", "xab", "zab"]
    assert results[1].score == results[2].score


def test_no_match_returns_none() -> None:
    assert fuzzy_match("xyz", "Ice Cream") is None
    assert fuzzy_match("toolong", "short") is None


def test_empty_query_matches_anything() -> None:
    assert fuzzy_match("", "anything") == (0, ())
    assert fuzzy_match("", "") == (0, ())


def test_contiguous_run_beats_scattered_match() -> None:
    contiguous, _ = fuzzy_match("abc", "xxabcxx")
    scattered, _ = fuzzy_match("abc", "xaxbxcx")
    assert contiguous > scattered


def test_shorter_span_scores_higher() -> None:
    short, _ = fuzzy_match("ac", "abc")
    long, _ = fuzzy_match("ac", "abbbbc")
    assert short > long


def test_word_boundary_match_is_preferred() -> None:
    # the "C" of "Cream" starts a word, the "c" of "Ice" does not
    _, positions = fuzzy_match("c", "Ice Cream")
    assert positions == (4,)


def test_camel_case_hump_gets_bonus() -> None:
    hump, _ = fuzzy_match("b", "fooBar")
    inner, _ = fuzzy_match("b", "foobar")
    assert hump > inner


def test_smart_case() -> None:
    assert fuzzy_match("ice", "ICE CREAM") is not None
    assert fuzzy_match("Ice", "ice cream") is None
    assert fuzzy_match("Ice", "Ice cream") is not None


def test_positions_are_in_order_and_point_at_query_chars() -> None:
    text = "A Pile of sweet, sweet mustard"
    _, positions = fuzzy_match("pswm", text)

    assert list(positions) == sorted(positions)
    assert "".join(text[p] for p in positions).lower() == "pswm"


def test_as_candidates_accepts_strings_candidates_and_titled_objects() -> None:
    class Novel:
        title = "Solo Leveling"

    novel = Novel()
    out = as_candidates(["plain", Candidate("kept", 42), novel])

    assert out[0] == Candidate("plain", "plain")
    assert out[1] == Candidate("kept", 42)
    assert out[2].label == "Solo Leveling"
    assert out[2].payload is novel
