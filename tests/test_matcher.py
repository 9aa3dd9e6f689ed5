"""Unit tests for keyword matching and scoring."""

import pytest

from keyword_crawler.crawler.matcher import KeywordMatcher


TEXT = (
    "Python is a programming language. Many teams use Python for data work, "
    "and python scripts glue systems together. Snakes are unrelated."
)


def test_match_counts_case_insensitive_occurrences():
    """All casings count towards one match per keyword."""
    matcher = KeywordMatcher(context_chars=20, whole_words=True)

    matches = matcher.match(TEXT, ["python"], "https://example.com/")

    assert len(matches) == 1
    match = matches[0]
    assert match.keyword == "python"
    assert match.count == 3
    assert match.source_url == "https://example.com/"
    assert match.cleaned_text == TEXT


def test_absent_keyword_produces_no_match():
    """Zero occurrences means no record at all, not a zero-count record."""
    matcher = KeywordMatcher()

    matches = matcher.match(TEXT, ["rust", "python", "golang"], "https://example.com/")

    assert [m.keyword for m in matches] == ["python"]


def test_matches_follow_keyword_order():
    """Matches for one page are in keyword input order."""
    matcher = KeywordMatcher()

    matches = matcher.match(TEXT, ["snakes", "language", "python"], "https://example.com/")

    assert [m.keyword for m in matches] == ["snakes", "language", "python"]


def test_whole_word_matching_skips_partial_words():
    """Word-boundary mode ignores keywords embedded in longer words."""
    text = "Examples abound, but one example is enough."

    whole = KeywordMatcher(whole_words=True).match(text, ["example"], "u")
    substring = KeywordMatcher(whole_words=False).match(text, ["example"], "u")

    assert whole[0].count == 1
    assert substring[0].count == 2


def test_keywords_with_regex_characters_are_literal():
    """Keywords are escaped before matching."""
    text = "We write C++ and C# daily; C is fine too."

    matches = KeywordMatcher().match(text, ["C++", "c#"], "u")

    assert [(m.keyword, m.count) for m in matches] == [("C++", 1), ("c#", 1)]


def test_context_is_trimmed_to_word_boundaries():
    """The context window never starts or ends in the middle of a word."""
    matcher = KeywordMatcher(context_chars=15)

    match = matcher.match(TEXT, ["teams"], "u")[0]

    assert "teams" in match.context
    assert match.context.startswith("...")
    assert match.context.endswith("...")
    inner = match.context.strip(".")
    for word in inner.split():
        assert word.strip(",.") in TEXT


def test_context_without_truncation_has_no_ellipsis():
    """A short page is returned whole as context."""
    match = KeywordMatcher(context_chars=80).match("just python here", ["python"], "u")[0]

    assert match.context == "just python here"


def test_title_boosts_relevance():
    """A keyword that also appears in the title scores higher."""
    matcher = KeywordMatcher()

    plain = matcher.match(TEXT, ["python"], "u")[0]
    boosted = matcher.match(TEXT, ["python"], "u", title="Python tutorial")[0]

    assert boosted.relevance_score > plain.relevance_score


@pytest.mark.parametrize(
    "count, position, length, in_title",
    [
        (1, 0, 1, True),
        (500, 0, 10, True),
        (1, 9999, 10000, False),
        (3, 50, 100, False),
    ],
)
def test_score_is_clamped(count, position, length, in_title):
    """Relevance always lies in [0, 1]."""
    score = KeywordMatcher.score(count, position, length, in_title)

    assert 0.0 <= score <= 1.0


def test_empty_text_yields_nothing():
    """Nothing to match in an empty page."""
    assert KeywordMatcher().match("", ["python"], "u") == []
