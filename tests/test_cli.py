"""
Integration tests for smartsort.cli module.

Tests CLI argument parsing and end-to-end functionality.
"""

import json
from pathlib import Path

import pytest

from smartsort.cli import build_config, create_parser, main, run
from smartsort.config import RunConfig


class TestCreateParser:
    """Tests for create_parser function."""

    def test_creates_parser(self):
        parser = create_parser()
        assert parser is not None

    def test_directory_required(self):
        parser = create_parser()

        with pytest.raises(SystemExit):
            parser.parse_args([])

    def test_parses_directory(self):
        parser = create_parser()
        args = parser.parse_args(["/tmp/test"])

        assert args.directory == "/tmp/test"

    def test_dry_run_flag(self):
        parser = create_parser()

        args = parser.parse_args(["/tmp", "--dry-run"])
        assert args.dry_run is True

        args = parser.parse_args(["/tmp", "-n"])
        assert args.dry_run is True

        args = parser.parse_args(["/tmp"])
        assert args.dry_run is False

    def test_interactive_flag(self):
        parser = create_parser()

        args = parser.parse_args(["/tmp", "--interactive"])
        assert args.interactive is True

        args = parser.parse_args(["/tmp", "-i"])
        assert args.interactive is True

    def test_date_options(self):
        parser = create_parser()

        args = parser.parse_args(["/tmp", "--by-date", "--date-format", "%Y"])

        assert args.by_date is True
        assert args.date_format == "%Y"

    def test_defaults(self):
        args = create_parser().parse_args(["/tmp"])

        assert args.config is None
        assert args.by_date is False
        assert args.date_format is None
        assert args.log_file is None
        assert args.no_color is False
        assert args.verbose is False

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc:
            create_parser().parse_args(["--version"])

        assert exc.value.code == 0
        assert "smartsort 1.0.0" in capsys.readouterr().out

    def test_help_lists_categories(self):
        help_text = create_parser().format_help()

        assert "images" in help_text
        assert "everything else" in help_text

    def test_help_mentions_hidden_files(self):
        help_text = create_parser().format_help()

        assert "Hidden files" in help_text
        assert '"skip_hidden": false' in help_text


class TestBuildConfig:
    """Tests for build_config function."""

    def test_flags_override_defaults(self, tmp_path: Path):
        args = create_parser().parse_args([
            "/tmp", "-n", "-i", "--by-date", "--date-format", "%Y", "--log-file", str(tmp_path / "run.log"),
        ])

        config = build_config(args)

        assert config.dry_run is True
        assert config.interactive is True
        assert config.date_organisation is True
        assert config.date_format == "%Y"
        assert config.log_file == tmp_path / "run.log"

    def test_flags_override_config_file(self, tmp_path: Path):
        config_file = tmp_path / "config.json"
        config_file.write_text(json.dumps({
            "categories": {"pics": ["jpg"], "misc": []},
            "date_organisation": True,
            "date_format": "%Y/%m",
        }))
        args = create_parser().parse_args(["/tmp", "--config", str(config_file), "--date-format", "%Y"])

        config = build_config(args)

        assert config.rules.names == ("pics", "misc")
        assert config.date_organisation is True
        assert config.date_format == "%Y"


class TestRun:
    """Tests for run function."""

    def test_returns_zero_on_success(self, temp_dir: Path, sample_files: dict, log_file: Path, reporter):
        args = create_parser().parse_args([str(temp_dir), "--log-file", str(log_file)])

        result = run(args, reporter=reporter)

        assert result == 0
        assert (temp_dir / "images" / "photo.JPG").exists()
        assert log_file.exists()

    def test_returns_one_on_invalid_directory(self, temp_dir: Path, capsys):
        args = create_parser().parse_args([str(temp_dir / "nonexistent")])

        result = run(args)

        assert result == 1
        assert "not a valid directory" in capsys.readouterr().err

    def test_returns_one_on_bad_config(self, temp_dir: Path, tmp_path: Path, capsys):
        config_file = tmp_path / "config.json"
        config_file.write_text(json.dumps({"categories": {"images": ["jpg"]}}))
        args = create_parser().parse_args([str(temp_dir), "--config", str(config_file)])

        result = run(args)

        assert result == 1
        assert "catch-all" in capsys.readouterr().err

    def test_returns_one_on_move_failure(self, temp_dir: Path, sample_files: dict, log_file: Path, reporter):
        squatter = temp_dir / "documents" / "report.pdf"
        squatter.mkdir(parents=True)
        (squatter / "keep.md").write_text("keep")
        args = create_parser().parse_args([str(temp_dir), "--log-file", str(log_file)])

        assert run(args, reporter=reporter) == 1

    def test_dry_run_does_not_modify(self, temp_dir: Path, sample_files: dict, log_file: Path, reporter):
        original_files = sorted(p.name for p in temp_dir.iterdir())
        args = create_parser().parse_args([str(temp_dir), "--dry-run", "--log-file", str(log_file)])

        result = run(args, reporter=reporter)

        assert result == 0
        assert sorted(p.name for p in temp_dir.iterdir()) == original_files
        assert not log_file.exists()

    def test_interactive_declined_returns_zero(self, temp_dir: Path, sample_files: dict, log_file: Path, reporter):
        args = create_parser().parse_args([str(temp_dir), "-i", "--log-file", str(log_file)])

        result = run(args, reporter=reporter, confirm=lambda message: False)

        assert result == 0
        assert all(f.exists() for f in sample_files.values())

    def test_by_date(self, temp_dir: Path, march_file: Path, log_file: Path, reporter):
        args = create_parser().parse_args([str(temp_dir), "--by-date", "--log-file", str(log_file)])

        assert run(args, reporter=reporter) == 0
        assert (temp_dir / "documents" / "2024-03" / "minutes.docx").exists()


class TestMain:
    """Tests for main function."""

    def test_main_end_to_end(self, temp_dir: Path, sample_files: dict, log_file: Path, capsys):
        result = main([str(temp_dir), "--no-color", "--log-file", str(log_file)])

        out = capsys.readouterr().out
        assert result == 0
        assert "Successfully moved: 4" in out
        assert "\033[" not in out
        assert (temp_dir / "other" / "notes").exists()

    def test_main_with_base_config(self, temp_dir: Path, sample_files: dict, log_file: Path, reporter):
        args = create_parser().parse_args([str(temp_dir), "--log-file", str(log_file)])
        config = RunConfig(date_organisation=True, date_format="sorted")

        assert run(args, config, reporter=reporter) == 0
        assert (temp_dir / "images" / "sorted" / "photo.JPG").exists()
