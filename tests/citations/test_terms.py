"""Tests for search-term extraction."""

from __future__ import annotations

from repocast.citations.terms import extract_search_terms


def test_terms_are_ordered_by_shape_then_first_seen() -> None:
    texts = [
        "The LinkStore keeps entries; parse_input feeds parseUrl.",
        "RequestHandler calls buildResponse.",
    ]

    assert extract_search_terms(texts) == [
        "parseUrl",
        "buildResponse",
        "LinkStore",
        "RequestHandler",
        "parse_input",
        "keeps",
        "entries",
        "feeds",
        "calls",
    ]


def test_single_word_identifiers_are_terms() -> None:
    terms = extract_search_terms(["The main entry is main() in server.py calling handler and route"])

    assert terms == ["main", "entry", "server", "calling", "handler", "route"]


def test_single_words_only_fill_remaining_slots() -> None:
    texts = ["Router wires render into startServer"]

    assert extract_search_terms(texts) == ["startServer", "wires", "render", "Router"]


def test_terms_are_deduplicated_and_limited() -> None:
    text = " ".join(f"handlerNumber{chr(97 + i)}X" for i in range(15)) + " handlerNumberaX"

    terms = extract_search_terms([text])

    assert len(terms) == 10
    assert len(set(terms)) == 10
    assert all(term.startswith("handlerNumber") for term in terms)


def test_short_tokens_and_stopwords_are_skipped() -> None:
    texts = ["see GitHub or YouTube, a_b isX and TypeScript with this"]

    assert extract_search_terms(texts) == []


def test_custom_limit() -> None:
    assert extract_search_terms(["alphaBeta gammaDelta epsilonZeta"], limit=2) == [
        "alphaBeta",
        "gammaDelta",
    ]
