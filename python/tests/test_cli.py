"""Command line front end tests."""

import pytest

from tracker_dataset.cli import build_parser, main
from tracker_dataset.descriptor import read_descriptor


class TestParser:
    def test_defaults(self):
        args = build_parser().parse_args([])
        assert args.longitude == 139.628999
        assert args.latitude == 35.610381
        assert args.timezone == 9.0
        assert args.interval == 60
        assert args.period == "nd"
        assert str(args.output_dir) == "tracker-data"
        assert not args.verbose
        assert not args.keep

    def test_options(self):
        args = build_parser().parse_args(
            ["-x", "-89.6", "-y", "39.8", "-t", "-6", "-i", "600", "-p", "ty", "-o", "out", "-v"]
        )
        assert args.longitude == -89.6
        assert args.timezone == -6.0
        assert args.interval == 600
        assert args.period == "ty"
        assert args.verbose

    def test_unknown_period(self, capsys):
        with pytest.raises(SystemExit) as exc:
            build_parser().parse_args(["-p", "xx"])
        assert exc.value.code == 2

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc:
            build_parser().parse_args(["--version"])
        assert exc.value.code == 0
        assert "v1.2" in capsys.readouterr().out


class TestMain:
    def test_invalid_interval(self, tmp_path):
        assert main(["-i", "700", "-o", str(tmp_path / "out")]) == 1
        assert not (tmp_path / "out").exists()

    def test_invalid_timezone(self, tmp_path):
        assert main(["-t", "13", "-o", str(tmp_path / "out")]) == 1

    def test_today_hourly(self, tmp_path):
        out = tmp_path / "out"
        out.mkdir()
        (out / "19990101.csv").write_text("old\n")
        assert main(["-p", "td", "-i", "3600", "-o", str(out)]) == 0
        assert not (out / "19990101.csv").exists()
        day_files = list(out.glob("[0-9]*.bin"))
        assert len(day_files) == 1
        assert day_files[0].stat().st_size == 24 * 19
        assert read_descriptor(out / "dset.txt")["dayfiles-#"] == "1"
        (srs,) = out.glob("srs-*.csv")
        assert len(srs.read_text().splitlines()) == 1
