"""Tests for repository URL parsing."""

from __future__ import annotations

import pytest

from repocast.errors import InvalidRepositoryUrl
from repocast.locator import parse_repository_url
from repocast.models import RepositoryRef


@pytest.mark.parametrize(
    ("url", "expected"),
    [
        ("https://github.com/acme/shortener", RepositoryRef("acme", "shortener", "main")),
        ("github.com/acme/shortener", RepositoryRef("acme", "shortener", "main")),
        ("https://www.github.com/acme/shortener.git", RepositoryRef("acme", "shortener", "main")),
        ("https://github.com/acme/shortener/", RepositoryRef("acme", "shortener", "main")),
        (
            "https://github.com/acme/shortener/tree/release-2",
            RepositoryRef("acme", "shortener", "release-2"),
        ),
        ("https://github.com/acme/shortener/blob/main/README.md", RepositoryRef("acme", "shortener")),
    ],
)
def test_parse_repository_url(url: str, expected: RepositoryRef) -> None:
    assert parse_repository_url(url) == expected


@pytest.mark.parametrize(
    "url",
    [
        "",
        "   ",
        "https://github.com/acme",
        "https://gitlab.com/acme/shortener",
        "ftp://github.com/acme/shortener",
        "not a url",
    ],
)
def test_parse_repository_url_rejects_malformed(url: str) -> None:
    with pytest.raises(InvalidRepositoryUrl):
        parse_repository_url(url)


def test_default_branch_can_be_overridden() -> None:
    ref = parse_repository_url("github.com/acme/shortener", default_branch="master")

    assert ref.key == "acme/shortener@master"
