"""Tests for CLI functionality."""

import json
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from apps.cli.main import app
from core.errors import FeedTransportError
from core.models import UpdateSet


@pytest.fixture
def update_set_file(tmp_path, update_set_json):
    path = tmp_path / "update_set.json"
    path.write_text(json.dumps(update_set_json))
    return path


class TestCLI:
    """Test CLI command interface."""

    def setup_method(self):
        """Setup test fixtures."""
        self.runner = CliRunner()

    def test_cli_help_command(self):
        result = self.runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "autoupdate" in result.output.lower()
        assert "run" in result.output
        assert "apply" in result.output

    def test_apply_dry_run(self, project_dir, update_set_file, gemfile_text):
        """Should print the diff and leave files alone."""
        result = self.runner.invoke(app, [
            "apply", str(update_set_file), "--root", str(project_dir), "--dry-run"
        ])

        assert result.exit_code == 0
        assert "+gem \"rails\", '~> 4.0.3'" in result.output
        assert "-gem \"rails\", \"3.0.0.beta3\"" in result.output
        assert (project_dir / "Gemfile").read_text() == gemfile_text

    def test_apply_writes_files(self, project_dir, update_set_file):
        """Should write updated manifests in place."""
        result = self.runner.invoke(app, ["apply", str(update_set_file), "--root", str(project_dir)])

        assert result.exit_code == 0
        assert "Updated 1 files" in result.output
        assert "gem \"warden\", '~> 1.2.3'" in (project_dir / "Gemfile").read_text()

    def test_apply_no_changes(self, project_dir, tmp_path):
        """Should exit 2 when nothing changes."""
        empty = tmp_path / "empty.json"
        empty.write_text(json.dumps({"id": 4, "requirement_updates": {}, "version_updates": {}}))

        result = self.runner.invoke(app, ["apply", str(empty), "--root", str(project_dir)])

        assert result.exit_code == 2
        assert "No updates available" in result.output

    def test_apply_unknown_ecosystem(self, project_dir, tmp_path):
        update_set = tmp_path / "cargo.json"
        update_set.write_text(json.dumps({
            "id": 5,
            "requirement_updates": {"Cargo": [{"file": {"path": "Cargo.toml", "sha": ""}, "patch": ""}]},
        }))

        result = self.runner.invoke(app, ["apply", str(update_set), "--root", str(project_dir)])

        assert result.exit_code == 1
        assert "Unknown ecosystem: Cargo" in result.output

    def test_apply_missing_file(self, tmp_path):
        result = self.runner.invoke(app, ["apply", str(tmp_path / "nope.json")])

        assert result.exit_code == 1
        assert "not found" in result.output

    def test_apply_invalid_json(self, tmp_path):
        bad = tmp_path / "bad.json"
        bad.write_text("{not json")

        result = self.runner.invoke(app, ["apply", str(bad)])

        assert result.exit_code == 1
        assert "not valid JSON" in result.output

    def test_raw_format_outputs_json(self, project_dir, tmp_path, update_set_json):
        update_set_json["requirement_updates"]["Rubygem"][0]["file"]["sha"] = ""
        update_set_file = tmp_path / "update_set.json"
        update_set_file.write_text(json.dumps(update_set_json))
        config = tmp_path / "config.yml"
        config.write_text("raw_format: true\n")

        result = self.runner.invoke(app, [
            "apply", str(update_set_file), "--root", str(project_dir),
            "--config", str(config), "--dry-run",
        ])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["id"] == 1
        assert data["files"][0]["path"] == "Gemfile"
        assert data["files"][0]["changed"] is True

    def test_ignored_paths(self, project_dir, update_set_file, tmp_path, gemfile_text):
        """Should drop files matching ignored_paths."""
        config = tmp_path / "config.yml"
        config.write_text("ignored_paths:\n  - Gem*\n")

        result = self.runner.invoke(app, [
            "apply", str(update_set_file), "--root", str(project_dir), "--config", str(config),
        ])

        assert result.exit_code == 2
        assert (project_dir / "Gemfile").read_text() == gemfile_text

    def test_invalid_config(self, update_set_file, tmp_path):
        config = tmp_path / "config.yml"
        config.write_text("api_key: [unclosed\n")

        result = self.runner.invoke(app, ["apply", str(update_set_file), "--config", str(config)])

        assert result.exit_code == 1
        assert "Invalid configuration" in result.output

    def test_run_fetches_update_set(self, project_dir, tmp_path, update_set_json):
        """Should fetch the set from the configured endpoint."""
        config = tmp_path / "config.yml"
        config.write_text("api_endpoint: http://localhost:9292/v1\n")

        with patch("apps.cli.main.UpdateFeedClient") as mock_client_class:
            mock_client = mock_client_class.return_value
            mock_client.fetch_update_set.return_value = UpdateSet.from_dict(update_set_json)

            result = self.runner.invoke(app, [
                "run", "42", "--config", str(config), "--root", str(project_dir), "--dry-run"
            ])

        assert result.exit_code == 0
        mock_client_class.assert_called_once_with("http://localhost:9292/v1")
        mock_client.fetch_update_set.assert_called_once_with("42")

    def test_run_feed_error(self, tmp_path):
        config = tmp_path / "config.yml"
        config.write_text("project_slug: demo\n")

        with patch("apps.cli.main.UpdateFeedClient") as mock_client_class:
            mock_client_class.return_value.fetch_update_set.side_effect = FeedTransportError("Network error")

            result = self.runner.invoke(app, ["run", "42", "--config", str(config)])

        assert result.exit_code == 1
        assert "Network error" in result.output

    def test_apply_keeps_every_change_to_one_file(self, project_dir, tmp_path):
        """A patch and a pin bump on the same file both reach the disk."""
        update_set = tmp_path / "pypi.json"
        update_set.write_text(json.dumps({
            "id": 6,
            "requirement_updates": {"PypiPackage": [{
                "file": {"path": "requirements.txt"},
                "patch": "@@ -3 +3 @@\n-uvicorn>=0.18.0\n+uvicorn>=0.30.0\n",
            }]},
            "version_updates": {"PypiPackage": [{
                "package": {"name": "fastapi", "slug": "fastapi", "type": "PypiPackage"},
                "old_version": "0.85.0",
                "target_version": "0.115.0",
            }]},
        }))

        result = self.runner.invoke(app, ["apply", str(update_set), "--root", str(project_dir)])

        assert result.exit_code == 0
        assert "Updated 1 files" in result.output
        written = (project_dir / "requirements.txt").read_text()
        assert "fastapi==0.115.0" in written
        assert "uvicorn>=0.30.0" in written

    def test_apply_non_utf8_manifest(self, project_dir, update_set_file):
        (project_dir / "Gemfile").write_bytes(b"gem \"caf\xe9\"\n")

        result = self.runner.invoke(app, [
            "apply", str(update_set_file), "--root", str(project_dir), "--dry-run"
        ])

        assert result.exit_code == 1
        assert "Gemfile is not UTF-8" in result.output

    def test_apply_non_utf8_update_set(self, tmp_path):
        bad = tmp_path / "latin1.json"
        bad.write_bytes(b'{"id": 1, "note": "caf\xe9"}')

        result = self.runner.invoke(app, ["apply", str(bad)])

        assert result.exit_code == 1
        assert "not valid JSON" in result.output
