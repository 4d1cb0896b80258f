"""Tests for configuration loading."""

import pytest

from core.config import DEFAULT_API_ENDPOINT, Config, load_config_file, new_config
from core.errors import ConfigError


class TestConfig:
    """Test YAML configuration parsing."""

    def test_defaults(self):
        config = new_config(b"")

        assert config == Config()
        assert config.api_endpoint == "https://api.gemnasium.com/v1"
        assert config.project_branch == "master"
        assert config.ignored_paths == []
        assert config.raw_format is False

    def test_recognized_keys(self):
        config = new_config(
            "api_endpoint: http://localhost:9292/v1\n"
            "api_key: secret\n"
            "project_slug: gemnasium/toolbelt\n"
            "project_branch: develop\n"
            "ignored_paths:\n  - vendor/*\n  - spec/fixtures/*\n"
            "raw_format: true\n"
        )

        assert config.api_endpoint == "http://localhost:9292/v1"
        assert config.api_key == "secret"
        assert config.project_slug == "gemnasium/toolbelt"
        assert config.project_branch == "develop"
        assert config.ignored_paths == ["vendor/*", "spec/fixtures/*"]
        assert config.raw_format is True

    def test_partial_document_keeps_defaults(self):
        config = new_config("api_key: secret\nunknown_key: 42\n")

        assert config.api_key == "secret"
        assert config.api_endpoint == DEFAULT_API_ENDPOINT
        assert config.project_branch == "master"

    def test_malformed_yaml_is_fatal(self):
        with pytest.raises(ConfigError):
            new_config("api_key: [unclosed\n")

    def test_wrong_type_is_fatal(self):
        with pytest.raises(ConfigError):
            new_config("raw_format: sometimes\n")

        with pytest.raises(ConfigError):
            new_config("ignored_paths: [1, 2]\n")

    def test_non_mapping_document(self):
        with pytest.raises(ConfigError):
            new_config("- just\n- a list\n")

    def test_load_config_file(self, tmp_path):
        config_file = tmp_path / "config.yml"
        config_file.write_text("project_slug: my-project\n")

        assert load_config_file(config_file).project_slug == "my-project"

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError):
            load_config_file(tmp_path / "nope.yml")
