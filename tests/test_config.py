"""
Tests for RepositoryConfig - the per-root .git_config record.
"""

import json

import pytest

from repomirror.config import RepositoryConfig, parse_bool
from repomirror.errors import ConfigError


class TestPersistence:
    """Tests for load()/save()."""

    def test_round_trip(self, tmp_path):
        config = RepositoryConfig(repo="octo/example", branch="dev", username="octo", token="t0k", quiet=True)
        config.save(tmp_path)

        loaded = RepositoryConfig.load(tmp_path)

        assert loaded == config

    def test_file_uses_documented_keys(self, tmp_path):
        RepositoryConfig(repo="octo/example", username="octo", token="t0k").save(tmp_path)

        data = json.loads((tmp_path / ".git_config").read_text())

        assert data == {"username": "octo", "token": "t0k", "repo": "octo/example", "branch": "main"}

    def test_unknown_keys_preserved(self, tmp_path):
        (tmp_path / ".git_config").write_text(json.dumps({"repo": "octo/example", "note": "keep me"}))

        config = RepositoryConfig.load(tmp_path)
        config.branch = "dev"
        config.save(tmp_path)

        data = json.loads((tmp_path / ".git_config").read_text())
        assert data["note"] == "keep me"
        assert data["branch"] == "dev"

    def test_missing_branch_defaults_to_main(self, tmp_path):
        (tmp_path / ".git_config").write_text(json.dumps({"repo": "octo/example", "branch": None}))
        assert RepositoryConfig.load(tmp_path).branch == "main"

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="No .git_config"):
            RepositoryConfig.load(tmp_path)

    def test_corrupt_file(self, tmp_path):
        (tmp_path / ".git_config").write_text("{not json")
        with pytest.raises(ConfigError):
            RepositoryConfig.load(tmp_path)

    def test_non_mapping_file(self, tmp_path):
        (tmp_path / ".git_config").write_text("[1, 2]")
        with pytest.raises(ConfigError, match="key/value"):
            RepositoryConfig.load(tmp_path)


class TestValidate:
    """Tests for validate() - required before any sync."""

    def test_valid(self):
        RepositoryConfig(repo="octo/example").validate()

    def test_missing_repo(self):
        with pytest.raises(ConfigError, match="No repository"):
            RepositoryConfig().validate()

    @pytest.mark.parametrize("repo", ["octo", "octo/", "/example", "a/b/c"])
    def test_malformed_repo(self, repo):
        with pytest.raises(ConfigError):
            RepositoryConfig(repo=repo).validate()

    def test_empty_branch(self):
        with pytest.raises(ConfigError, match="branch"):
            RepositoryConfig(repo="octo/example", branch="").validate()


class TestSetValue:
    """Tests for set_value() - the `config <key> <value>` edit."""

    def test_user_alias(self):
        config = RepositoryConfig()
        assert config.set_value("user", "octo") == "username"
        assert config.username == "octo"

    def test_plain_keys(self):
        config = RepositoryConfig()
        config.set_value("repo", "octo/example")
        config.set_value("branch", "dev")
        config.set_value("TOKEN", "t0k")
        assert (config.repo, config.branch, config.token) == ("octo/example", "dev", "t0k")

    def test_quiet_parsed_as_bool(self):
        config = RepositoryConfig()
        config.set_value("quiet", "yes")
        assert config.quiet is True
        config.set_value("quiet", "off")
        assert config.quiet is False

    def test_unknown_key(self):
        with pytest.raises(ConfigError, match="Unknown config key"):
            RepositoryConfig().set_value("color", "blue")


def test_repr_masks_token():
    text = repr(RepositoryConfig(repo="octo/example", token="super-secret"))
    assert "super-secret" not in text
    assert "***" in text


@pytest.mark.parametrize("value,expected", [("1", True), ("TRUE", True), ("no", False), ("0", False)])
def test_parse_bool(value, expected):
    assert parse_bool(value) is expected


def test_parse_bool_rejects_garbage():
    with pytest.raises(ConfigError):
        parse_bool("maybe")


@pytest.mark.parametrize("stored,expected", [("false", False), ("yes", True), (True, True), (0, False)])
def test_hand_edited_quiet_values(tmp_path, stored, expected):
    (tmp_path / ".git_config").write_text(json.dumps({"repo": "octo/example", "quiet": stored}))
    assert RepositoryConfig.load(tmp_path).quiet is expected


def test_hand_edited_quiet_garbage(tmp_path):
    (tmp_path / ".git_config").write_text(json.dumps({"repo": "octo/example", "quiet": "maybe"}))
    with pytest.raises(ConfigError):
        RepositoryConfig.load(tmp_path)
