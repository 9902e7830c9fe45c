"""Tests for the top-level e CLI (version, help, config)."""

import json

from click.testing import CliRunner

from etools.cli import cli


class TestCliVersionFlag:
    """--version prints just the version number."""

    def test_prints_version_number(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "electron" not in result.output.lower()
        assert result.output.strip() != ""


class TestCliVersionSubcommand:
    """e version prints just the version number."""

    def test_same_as_flag(self):
        runner = CliRunner()
        flag_result = runner.invoke(cli, ["--version"])
        cmd_result = runner.invoke(cli, ["version"])
        assert cmd_result.exit_code == 0
        assert flag_result.output.strip() == cmd_result.output.strip()


class TestCliHelpSubcommand:
    """e help prints guidance to use --help."""

    def test_prints_guidance(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["help"])
        assert result.exit_code == 0
        assert "<command> --help" in result.output

    def test_short_help_flag(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["-h"])
        assert result.exit_code == 0
        assert "backport" in result.output
        assert "goma" in result.output


class TestCliConfigOption:
    """-c/--config loads a build configuration."""

    def test_missing_file_is_usage_error(self, tmp_path):
        runner = CliRunner()
        result = runner.invoke(cli, ["-c", str(tmp_path / "nope.json"), "version"])
        assert result.exit_code == 2

    def test_invalid_json_is_usage_error(self, tmp_path):
        config_file = tmp_path / "evm.json"
        config_file.write_text("{ invalid json }")
        runner = CliRunner()
        result = runner.invoke(cli, ["-c", str(config_file), "version"])
        assert result.exit_code == 2
        assert "--config" in result.output

    def test_invalid_mode_is_usage_error(self, tmp_path):
        config_file = tmp_path / "evm.json"
        config_file.write_text(json.dumps({"root": str(tmp_path), "goma": "sometimes"}))
        runner = CliRunner()
        result = runner.invoke(cli, ["-c", str(config_file), "version"])
        assert result.exit_code == 2

    def test_config_from_environment(self, tmp_path):
        config_file = tmp_path / "evm.json"
        config_file.write_text(json.dumps({"root": str(tmp_path), "goma": "cluster"}))
        runner = CliRunner()
        result = runner.invoke(
            cli,
            ["goma", "env"],
            env={"EVM_CONFIG": str(config_file), "CI": "1", "RAW_GOMA_AUTH": None},
        )
        assert result.exit_code == 0
        # An explicit config disables the CI policies.
        assert "GOMA_START_COMPILER_PROXY" not in result.output
        assert "GOMA_FALLBACK_ON_AUTH_FAILURE" not in result.output
