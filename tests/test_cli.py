"""
Tests for the byteview command line.
"""

import json
import logging

import pytest
from click.testing import CliRunner

from byteview.cli import cli


@pytest.fixture(autouse=True)
def byteview_dir(tmp_path, monkeypatch):
    """Isolate config, backups and the log file per test."""
    home = tmp_path / "home"
    monkeypatch.setenv("BYTEVIEW_DIR", str(home))
    yield home
    for handler in list(logging.getLogger("byteview").handlers):
        handler.close()


@pytest.fixture
def sample_file(tmp_path):
    path = tmp_path / "hey.txt"
    path.write_bytes(b"Hey!?")
    return path


@pytest.fixture
def runner():
    return CliRunner()


class TestVersion:
    def test_version(self, runner):
        """--version prints the version and exits"""
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "byteview" in result.output


class TestDump:
    """byteview dump"""

    def test_dump_hex(self, runner, sample_file):
        """Hex rendering of the first page"""
        result = runner.invoke(cli, ["dump", str(sample_file), "--mode", "hex"])
        assert result.exit_code == 0, result.output
        assert "48 65 79 21 3f" in result.output

    def test_dump_default_mode(self, runner, sample_file):
        """Without --mode the configured default (bytes) is used"""
        result = runner.invoke(cli, ["dump", str(sample_file)])
        assert result.exit_code == 0, result.output
        assert "72 101 121 33 63" in result.output

    def test_dump_page(self, runner, sample_file):
        """--page selects a later page"""
        runner.invoke(cli, ["config", "settings", "set", "viewer.page_size", "2"])

        result = runner.invoke(
            cli, ["dump", str(sample_file), "--mode", "chars", "--page", "2"]
        )

        assert result.exit_code == 0, result.output
        assert result.output.strip() == "y!"

    def test_dump_page_out_of_range(self, runner, sample_file):
        """A page past the end is an error"""
        runner.invoke(cli, ["config", "settings", "set", "viewer.page_size", "2"])

        result = runner.invoke(cli, ["dump", str(sample_file), "--page", "4"])

        assert result.exit_code == 1
        assert "does not exist" in result.output

    def test_dump_all(self, runner, sample_file):
        """--all concatenates every page"""
        runner.invoke(cli, ["config", "settings", "set", "viewer.page_size", "2"])

        result = runner.invoke(cli, ["dump", str(sample_file), "-m", "chars", "--all"])

        assert result.exit_code == 0, result.output
        assert result.output.strip() == "Hey!?"

    def test_dump_missing_file(self, runner, tmp_path):
        """A missing file exits with an error"""
        result = runner.invoke(cli, ["dump", str(tmp_path / "missing.bin")])
        assert result.exit_code == 1
        assert "Error" in result.output

    def test_dump_too_large(self, runner, tmp_path):
        """Files over max_file_size_mb are refused"""
        big = tmp_path / "big.bin"
        big.write_bytes(b"x" * 4096)
        runner.invoke(cli, ["config", "settings", "set", "max_file_size_mb", "0.001"])

        result = runner.invoke(cli, ["dump", str(big)])

        assert result.exit_code == 1
        assert "File size was too large." in result.output

    def test_dump_rejects_unknown_mode(self, runner, sample_file):
        """--mode only accepts data type names"""
        result = runner.invoke(cli, ["dump", str(sample_file), "--mode", "octal"])
        assert result.exit_code != 0


class TestInfo:
    """byteview info"""

    def test_info_json(self, runner, sample_file):
        """--json reports size and page count"""
        result = runner.invoke(cli, ["info", str(sample_file), "--json"])

        assert result.exit_code == 0, result.output
        assert json.loads(result.output) == {
            "filename": "hey.txt",
            "file_size": 5,
            "page_size": 10000,
            "page_count": 1,
        }

    def test_info_text(self, runner, sample_file):
        """Plain output uses the viewer's labels"""
        result = runner.invoke(cli, ["info", str(sample_file)])
        assert result.exit_code == 0, result.output
        assert "File size: 5 bytes" in result.output
        assert "Pages: 1" in result.output


class TestConfigCommands:
    """byteview config ..."""

    def test_init_and_view(self, runner, byteview_dir):
        """init writes config.yml; a second init needs --force"""
        result = runner.invoke(cli, ["config", "init"])
        assert result.exit_code == 0, result.output
        assert (byteview_dir / "config.yml").exists()

        result = runner.invoke(cli, ["config", "init"])
        assert result.exit_code == 1

        result = runner.invoke(cli, ["config", "init", "--force"])
        assert result.exit_code == 0

        result = runner.invoke(cli, ["config", "view"])
        assert "page_size: 10000" in result.output

    def test_validate_defaults(self, runner):
        """No config file validates with defaults"""
        result = runner.invoke(cli, ["config", "validate"])
        assert result.exit_code == 0, result.output
        assert "Configuration is valid" in result.output

    def test_validate_errors(self, runner, byteview_dir):
        """Invalid settings fail validation"""
        byteview_dir.mkdir(parents=True, exist_ok=True)
        (byteview_dir / "config.yml").write_text(
            "config:\n  viewer:\n    page_size: 0\n"
        )

        result = runner.invoke(cli, ["config", "validate"])

        assert result.exit_code == 1
        assert "viewer.page_size" in result.output

    @pytest.mark.parametrize(
        "args", [["config", "validate"], ["config", "settings", "list"], ["info"], ["dump"]]
    )
    def test_malformed_yaml_exits_cleanly(self, runner, byteview_dir, sample_file, args):
        """An unparseable config.yml is an error message, not a traceback"""
        byteview_dir.mkdir(parents=True, exist_ok=True)
        (byteview_dir / "config.yml").write_text("config: [unclosed\n")
        if args[0] in ("info", "dump"):
            args = args + [str(sample_file)]

        result = runner.invoke(cli, args)

        assert result.exit_code == 1
        assert "Invalid YAML" in result.output
        assert not isinstance(result.exception, ValueError)

    def test_settings_set_get_unset(self, runner):
        """Settings round trip through the CLI"""
        result = runner.invoke(
            cli, ["config", "settings", "set", "viewer.default_mode", "utf8-chars"]
        )
        assert result.exit_code == 0, result.output

        result = runner.invoke(
            cli, ["config", "settings", "get", "viewer.default_mode", "--json"]
        )
        assert json.loads(result.output)["value"] == "utf8-chars"

        result = runner.invoke(
            cli, ["config", "settings", "unset", "viewer.default_mode"]
        )
        assert result.exit_code == 0, result.output

        result = runner.invoke(
            cli, ["config", "settings", "get", "viewer.default_mode", "--json"]
        )
        assert json.loads(result.output)["value"] == "bytes"

    def test_settings_set_invalid(self, runner):
        """Invalid values exit with an error"""
        result = runner.invoke(cli, ["config", "settings", "set", "viewer.page_size", "0"])
        assert result.exit_code == 1

    def test_settings_list_json(self, runner):
        """list --json includes every key"""
        result = runner.invoke(cli, ["config", "settings", "list", "--json"])
        keys = {setting["key"] for setting in json.loads(result.output)}
        assert "viewer.page_size" in keys
        assert "decoder.chunk_size" in keys
