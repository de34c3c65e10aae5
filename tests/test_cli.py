"""
CLI Tests
=========

Tests for the mobihdr command, run through click's CliRunner.
"""

import json

import pytest
from click.testing import CliRunner

from mobihdr import __version__
from mobihdr.cli.errors import ExitCode
from mobihdr.cli.mobihdr import main
from mobihdr.header import DocHeader, PalmHeader, Compression


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def mobi_file(tmp_path):
    """A file holding both headers followed by some body bytes."""
    path = tmp_path / "book.mobi"
    data = (
        PalmHeader(compression=Compression.PALMDOC, text_length=5000, record_count=2).to_bytes()
        + DocHeader(header_length=232, exth_flags=0x40).to_bytes()
        + bytes(64)
    )
    path.write_bytes(data)
    return path


class TestCLI:
    """Tests for the mobihdr command line."""

    def test_help(self, runner: CliRunner):
        result = runner.invoke(main, ["--help"])
        assert result.exit_code == 0
        assert "--filename" in result.output

    def test_version(self, runner: CliRunner):
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_missing_filename(self, runner: CliRunner):
        """Test that the required option is enforced by click."""
        result = runner.invoke(main, [])
        assert result.exit_code == ExitCode.INVALID_ARGS
        assert "--filename" in result.output

    def test_text_output(self, runner: CliRunner, mobi_file):
        result = runner.invoke(main, ["--filename", str(mobi_file)])

        assert result.exit_code == 0
        assert "PalmDOC header (16 bytes)" in result.output
        assert "Compression: PalmDOC" in result.output
        assert "MOBI header (168 bytes)" in result.output
        assert "Identifier: 'MOBI'" in result.output
        assert "EXTH flags: EXTH present" in result.output

    def test_json_output(self, runner: CliRunner, mobi_file):
        result = runner.invoke(main, ["-f", str(mobi_file), "--format", "json"])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["palm_header"]["text_length"] == 5000
        assert data["palm_header"]["record_count"] == 2
        assert data["doc_header"]["identifier_text"] == "MOBI"
        assert data["doc_header"]["header_length"] == 232

    def test_missing_file(self, runner: CliRunner, tmp_path):
        result = runner.invoke(main, ["--filename", str(tmp_path / "nope.mobi")])

        assert result.exit_code == ExitCode.DECODE_ERROR
        assert "opening" in result.output

    def test_directory_path(self, runner: CliRunner, tmp_path):
        """Test that a directory is reported as an opening failure."""
        result = runner.invoke(main, ["--filename", str(tmp_path)])

        assert result.exit_code == ExitCode.DECODE_ERROR
        assert "opening" in result.output

    def test_close_failure(self, runner: CliRunner, mobi_file, failing_close):
        result = runner.invoke(main, ["--filename", str(mobi_file)])

        assert result.exit_code == ExitCode.DECODE_ERROR
        assert "closing" in result.output
        assert "device went away" in result.output

    def test_short_palm_header(self, runner: CliRunner, tmp_path):
        path = tmp_path / "tiny.mobi"
        path.write_bytes(b"\x02\x00\x00")

        result = runner.invoke(main, ["--filename", str(path)])

        assert result.exit_code == ExitCode.DECODE_ERROR
        assert "reading PalmDOC header" in result.output

    def test_short_doc_header(self, runner: CliRunner, tmp_path):
        path = tmp_path / "short.mobi"
        path.write_bytes(PalmHeader().to_bytes() + b"MOBI" + bytes(20))

        result = runner.invoke(main, ["--filename", str(path)])

        assert result.exit_code == ExitCode.DECODE_ERROR
        assert "reading MOBI header" in result.output
        assert "offset 16" in result.output

    def test_invalid_format(self, runner: CliRunner, mobi_file):
        result = runner.invoke(main, ["--filename", str(mobi_file), "--format", "xml"])
        assert result.exit_code == ExitCode.INVALID_ARGS
