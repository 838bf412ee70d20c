"""
Tests for parse_repo_identifier().
"""

import pytest

from repomirror.remote import parse_repo_identifier


@pytest.mark.parametrize("value", [
    "octo/example",
    "  octo/example  ",
    "https://github.com/octo/example",
    "https://github.com/octo/example/",
    "https://github.com/octo/example.git",
    "git@github.com:octo/example.git",
])
def test_accepted_forms(value):
    assert parse_repo_identifier(value) == ("octo/example", None)


def test_dots_and_dashes_in_names():
    assert parse_repo_identifier("my-org/repo.name_v2") == ("my-org/repo.name_v2", None)


@pytest.mark.parametrize("value", ["octo", "", "octo/example/extra", "octo example"])
def test_rejects_non_identifiers(value):
    repo, error = parse_repo_identifier(value)
    assert repo is None
    assert error == "Expected owner/name"


def test_rejects_dot_components():
    repo, error = parse_repo_identifier("../example")
    assert repo is None
    assert error


def test_unrecognized_github_url():
    repo, error = parse_repo_identifier("https://github.com/octo")
    assert repo is None
    assert "Unrecognized" in error
