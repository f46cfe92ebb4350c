"""Tests for the command line front end."""

import json
import os

import pytest

from cuecut import cli
from cuecut.config import DEFAULT_TEMPLATE


class TestParseArguments:
    """Test argument parsing."""

    def test_defaults(self, monkeypatch):
        """Test defaults when nothing is configured."""
        for name in ("CUECUT_THREADS", "CUECUT_FORMAT", "CUECUT_OUTPUT_DIR", "CUECUT_TEMPLATE"):
            monkeypatch.delenv(name, raising=False)

        config = cli.build_config(cli.parse_arguments([]))

        assert config.template == DEFAULT_TEMPLATE
        assert config.output_dir == "."
        assert config.output_format == "flac"
        assert config.extra_args == ()
        assert config.tracks == frozenset()
        assert config.concurrency is None
        assert config.dry_run is False
        assert config.log_file is None

    def test_options(self):
        """Test every option reaches the config."""
        args = cli.parse_arguments([
            "-o", "out", "-f", "ogg", "-F=-qscale:a", "-F", "6",
            "-t", "1", "-t", "3", "-n", "{track.number}", "-j", "2", "-d", "a.cue",
        ])
        config = cli.build_config(args)

        assert args.inputs == ["a.cue"]
        assert config.output_dir == "out"
        assert config.output_format == "ogg"
        assert config.extra_args == ("-qscale:a", "6")
        assert config.tracks == frozenset({1, 3})
        assert config.template == "{track.number}"
        assert config.concurrency == 2
        assert config.dry_run is True

    def test_environment(self, monkeypatch):
        """Test environment variables provide defaults."""
        monkeypatch.setenv("CUECUT_THREADS", "3")
        monkeypatch.setenv("CUECUT_FORMAT", "mp3")

        config = cli.build_config(cli.parse_arguments([]))

        assert config.concurrency == 3
        assert config.output_format == "mp3"

    def test_invalid_threads(self):
        """Test a zero worker count is rejected."""
        with pytest.raises(SystemExit):
            cli.parse_arguments(["-j", "0"])


class TestMain:
    """Test end-to-end runs without ffmpeg."""

    def test_dry_run(self, sample_sheet, write_sheet, tmp_path, capsys):
        """Test a dry run prints the planned files and exits 0."""
        sheet = write_sheet(sample_sheet)
        out = str(tmp_path / "out")

        code = cli.main(["-d", "-o", out, sheet])

        lines = capsys.readouterr().out.splitlines()
        assert code == 0
        assert lines == [
            os.path.join(out, "Some Band/1999 - Greatest Hits/1 - Intro.flac"),
            os.path.join(out, "Some Band/1999 - Greatest Hits/2 - Second Song.flac"),
            os.path.join(out, "Some Band/1999 - Greatest Hits/3 - Finale.flac"),
        ]
        assert not os.path.exists(out)

    def test_json_dump(self, sample_sheet, write_sheet, capsys):
        """Test --json makes stdout a single JSON document while logs go to stderr."""
        sheet = write_sheet(sample_sheet)

        code = cli.main(["-d", "--json", sheet])

        captured = capsys.readouterr()
        data = json.loads(captured.out)
        assert "Found 1 CUE sheet" in captured.err
        assert code == 0
        assert data[0]["title"] == "Greatest Hits"
        assert len(data[0]["tracks"]) == 3

    def test_malformed_sheet(self, write_sheet, capsys):
        """Test a malformed sheet exits 1 naming the sheet."""
        sheet = write_sheet('FILE "a.wav" WAVE\nTRACK 01 AUDIO\n  INDEX 01 00:99:00\n')

        code = cli.main(["-q", "-d", sheet])

        assert code == 1
        assert f"{sheet}:3:" in capsys.readouterr().err

    def test_no_sheets(self, tmp_path, capsys):
        """Test an empty directory is an error."""
        code = cli.main(["-q", "-d", str(tmp_path)])

        assert code == 1
        assert "No CUE sheets found" in capsys.readouterr().err

    def test_bad_input(self, tmp_path, capsys):
        """Test a non-sheet input is an error."""
        path = tmp_path / "a.flac"
        path.write_bytes(b"")

        assert cli.main(["-q", "-d", str(path)]) == 1
        assert "only directories and CUE sheets" in capsys.readouterr().err

    def test_ffmpeg_required(self, sample_sheet, write_sheet, monkeypatch, capsys):
        """Test a real run needs ffmpeg on PATH."""
        monkeypatch.setattr(cli.shutil, "which", lambda name: None)

        assert cli.main(["-q", write_sheet(sample_sheet)]) == 1
        assert "ffmpeg not found" in capsys.readouterr().err

    def test_extraction_failure(self, sample_sheet, write_sheet, monkeypatch, capsys):
        """Test an extraction failure exits 1 naming the track."""
        monkeypatch.setattr(cli.shutil, "which", lambda name: "/usr/bin/ffmpeg")

        def failing_split(sheets, config, log=None, first_error=None):
            from cuecut.errors import ExtractionError

            raise ExtractionError("ffmpeg failed", sheets[0], 2)

        monkeypatch.setattr(cli, "split_sheets", failing_split)
        sheet = write_sheet(sample_sheet)

        assert cli.main(["-q", sheet]) == 1
        assert f"{sheet}: track 2: ffmpeg failed" in capsys.readouterr().err
