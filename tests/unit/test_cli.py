"""
Tests for Mantissa Attribution CLI.

Tests CLI argument parsing, command execution, and output formatting.
"""

from __future__ import annotations

import argparse
import json

import pytest

from attribution import __version__
from attribution.cli import create_parser, main
from attribution.notice import DEFAULT_HEADER, NOTICE_SEPARATOR


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    """Keep user configuration files out of CLI runs."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    return home


@pytest.fixture
def failing_analysis_file(tmp_path):
    """Write an analysis input with one malformed package."""
    path = tmp_path / "failing.json"
    path.write_text(
        json.dumps(
            {
                "packages": [
                    {"id": "NPM::good:1.0", "declared_licenses": ["MIT"]},
                    {"id": "NPM::bad:1.0", "concluded_license": "MIT AND"},
                ]
            }
        ),
        encoding="utf-8",
    )
    return path


@pytest.fixture
def bad_license_file_analysis(tmp_path):
    """Write an analysis input with one malformed license file."""
    path = tmp_path / "bad-files.json"
    path.write_text(
        json.dumps(
            {
                "packages": [
                    {"id": "NPM::good:1.0", "declared_licenses": ["MIT"]},
                    {
                        "id": "NPM::files:1.0",
                        "declared_licenses": ["ISC"],
                        "license_files": [{"path": "LICENSE", "licenses": ["ISC OR"]}],
                    },
                ]
            }
        ),
        encoding="utf-8",
    )
    return path


class TestCLIParser:
    """Tests for CLI argument parsing."""

    @pytest.fixture
    def parser(self) -> argparse.ArgumentParser:
        """Return the CLI argument parser."""
        return create_parser()

    def test_cli_parser_resolve(self, parser):
        """Test resolve command argument parsing."""
        args = parser.parse_args(["resolve", "analysis.json", "-c", "config.yml", "--json"])

        assert args.command == "resolve"
        assert args.input == "analysis.json"
        assert args.config == "config.yml"
        assert args.json is True

    def test_cli_parser_notice_defaults(self, parser):
        """Test notice command default values."""
        args = parser.parse_args(["notice", "analysis.json"])

        assert args.command == "notice"
        assert args.output is None
        assert args.license_texts is None
        assert args.view is None
        assert args.include_excluded is False

    def test_cli_parser_notice_options(self, parser):
        """Test notice command options."""
        args = parser.parse_args(
            [
                "notice",
                "analysis.json",
                "-o",
                "NOTICE",
                "--license-texts",
                "texts",
                "more-texts",
                "--view",
                "only_declared",
                "--include-excluded",
            ]
        )

        assert args.output == "NOTICE"
        assert args.license_texts == ["texts", "more-texts"]
        assert args.view == "ONLY_DECLARED"
        assert args.include_excluded is True

    def test_cli_parser_unknown_view(self, parser):
        """Test unknown license views are rejected."""
        with pytest.raises(SystemExit):
            parser.parse_args(["notice", "analysis.json", "--view", "SOMETIMES"])

    def test_cli_parser_verbose(self, parser):
        """Test verbosity counting."""
        args = parser.parse_args(["-vv", "views"])
        assert args.verbose == 2


# =============================================================================
# Commands
# =============================================================================


class TestMainCommands:
    """Tests for command execution through main."""

    def test_no_command(self, capsys):
        """Test help is printed without a command."""
        assert main([]) == 0
        assert "usage: attribution" in capsys.readouterr().out

    def test_version(self, capsys):
        """Test the version command."""
        assert main(["version"]) == 0
        assert capsys.readouterr().out.strip() == f"Mantissa Attribution version {__version__}"

    def test_views(self, capsys):
        """Test listing license views."""
        assert main(["views"]) == 0

        output = capsys.readouterr().out
        assert "CONCLUDED_OR_REST" in output
        assert "concluded -> declared+detected" in output

    def test_resolve_text(self, analysis_file, capsys):
        """Test resolving to the text listing."""
        assert main(["resolve", str(analysis_file)]) == 0

        output = capsys.readouterr().out
        assert "NPM::left-pad:1.3.0:" in output
        assert "NPM::dev-only:0.1.0 (excluded):" in output
        assert "Copyright (c) 2018 Jane Doe" in output
        assert "Resolved 3 packages, 0 failed" in output

    def test_resolve_json(self, analysis_file, capsys):
        """Test resolving to JSON."""
        assert main(["resolve", str(analysis_file), "--json"]) == 0

        output = json.loads(capsys.readouterr().out)
        assert [p["id"] for p in output["packages"]] == [
            "Maven:org.example:lib:2.1",
            "NPM::dev-only:0.1.0",
            "NPM::left-pad:1.3.0",
        ]
        assert output["errors"] == {}
        assert output["license_file_errors"] == {}

    def test_resolve_with_failure(self, failing_analysis_file, capsys):
        """Test a failed package is reported and sets the exit code."""
        assert main(["resolve", str(failing_analysis_file)]) == 1

        output = capsys.readouterr().out
        assert "NPM::bad:1.0: FAILED" in output
        assert "Resolved 1 packages, 1 failed" in output

    def test_resolve_invalid_license_file(self, bad_license_file_analysis, capsys):
        """Test a malformed license file is reported without failing the other packages."""
        assert main(["resolve", str(bad_license_file_analysis), "--json"]) == 1

        output = json.loads(capsys.readouterr().out)
        assert [p["id"] for p in output["packages"]] == ["NPM::files:1.0", "NPM::good:1.0"]
        assert list(output["license_file_errors"]) == ["NPM::files:1.0"]
        assert output["errors"] == {}

    def test_resolve_missing_input(self, tmp_path, capsys):
        """Test a missing input file."""
        assert main(["resolve", str(tmp_path / "missing.json")]) == 1
        assert "Error resolving licenses" in capsys.readouterr().err

    def test_resolve_invalid_config(self, analysis_file, tmp_path, capsys):
        """Test an invalid configuration file."""
        config = tmp_path / "bad.yml"
        config.write_text("report:\n  license_view: SOMETIMES\n", encoding="utf-8")

        assert main(["resolve", str(analysis_file), "-c", str(config)]) == 1
        assert "Unknown license view" in capsys.readouterr().err

    def test_notice_stdout(self, analysis_file, license_text_dir, capsys):
        """Test writing the notice to stdout."""
        mit = (license_text_dir / "MIT").read_text(encoding="utf-8")
        apache = (license_text_dir / "Apache-2.0.txt").read_text(encoding="utf-8")

        assert main(["notice", str(analysis_file), "--license-texts", str(license_text_dir)]) == 0

        assert capsys.readouterr().out == (
            DEFAULT_HEADER
            + NOTICE_SEPARATOR
            + apache
            + NOTICE_SEPARATOR
            + "Copyright (c) 2018 Jane Doe\n"
            + "\n"
            + mit
        )

    def test_notice_output_file(self, analysis_file, license_text_dir, tmp_path, capsys):
        """Test writing the notice to a file."""
        output = tmp_path / "dist" / "NOTICE"

        exit_code = main(
            [
                "notice",
                str(analysis_file),
                "-o",
                str(output),
                "--license-texts",
                str(license_text_dir),
            ]
        )

        assert exit_code == 0
        assert output.read_bytes().startswith(DEFAULT_HEADER.encode("utf-8"))
        printed = capsys.readouterr().out
        assert f"Notice written to {output}" in printed
        assert "Licenses: 2" in printed

    def test_notice_missing_texts(self, analysis_file, tmp_path, capsys):
        """Test licenses without text are counted in the summary."""
        output = tmp_path / "NOTICE"

        assert main(["notice", str(analysis_file), "-o", str(output)]) == 0

        printed = capsys.readouterr().out
        assert "Licenses: 0" in printed
        assert "Missing license texts: 2" in printed

    def test_notice_with_config(self, analysis_file, config_file, license_text_dir, capsys):
        """Test configured view and footers are applied."""
        exit_code = main(
            [
                "notice",
                str(analysis_file),
                "-c",
                str(config_file),
                "--license-texts",
                str(license_text_dir),
            ]
        )

        assert exit_code == 0
        assert capsys.readouterr().out.endswith(NOTICE_SEPARATOR + "Generated for release 1.0.")

    def test_notice_with_failure(self, failing_analysis_file, license_text_dir, capsys):
        """Test resolvable packages are still reported when one fails."""
        exit_code = main(
            ["notice", str(failing_analysis_file), "--license-texts", str(license_text_dir)]
        )

        captured = capsys.readouterr()
        assert exit_code == 1
        assert "Permission is hereby granted" in captured.out
        assert "Failed to resolve NPM::bad:1.0" in captured.err
