"""Tests for the ripple-stl command-line tool."""

import json

import pytest
from click.testing import CliRunner

from ripple_stl.cli.generate import load_preset, main
from ripple_stl.cli.progress import format_bytes, format_time
from ripple_stl.core.params import WaveSource

FLAT = ["--resolution", "4", "--amplitude", "0", "--source", "0", "0", "1"]


@pytest.fixture
def runner():
    return CliRunner()


class TestGenerateCommand:
    """Tests for running the command."""

    def test_writes_stl(self, runner, tmp_path):
        output = tmp_path / "flat.stl"
        result = runner.invoke(main, FLAT + ["--output", str(output)])

        assert result.exit_code == 0, result.output
        assert output.stat().st_size == 84 + 50 * 80
        assert "STL generated" in result.output

    def test_custom_header(self, runner, tmp_path):
        output = tmp_path / "pond.stl"
        result = runner.invoke(main, FLAT + ["-o", str(output), "--header", "pond"])

        assert result.exit_code == 0, result.output
        assert output.read_bytes()[:4] == b"pond"

    def test_default_sources(self, runner, tmp_path):
        output = tmp_path / "default.stl"
        result = runner.invoke(main, ["-r", "12", "-o", str(output)])

        assert result.exit_code == 0, result.output
        assert "Source 4" in result.output

    def test_dry_run_writes_nothing(self, runner, tmp_path):
        output = tmp_path / "none.stl"
        result = runner.invoke(main, FLAT + ["-o", str(output), "--dry-run"])

        assert result.exit_code == 0, result.output
        assert not output.exists()
        assert "Dry run" in result.output

    def test_check_passes(self, runner, tmp_path):
        output = tmp_path / "checked.stl"
        result = runner.invoke(main, ["-r", "10", "-o", str(output), "--check"])

        assert result.exit_code == 0, result.output
        assert "Mesh checks passed" in result.output

    def test_invalid_resolution(self, runner, tmp_path):
        output = tmp_path / "bad.stl"
        result = runner.invoke(main, ["--resolution", "0", "-o", str(output)])

        assert result.exit_code == 1
        assert "resolution must be positive" in result.output
        assert not output.exists()

    def test_non_ascii_header(self, runner, tmp_path):
        result = runner.invoke(
            main, FLAT + ["-o", str(tmp_path / "x.stl"), "--header", "Wasseroberfläche"]
        )
        assert result.exit_code == 1

    def test_version(self, runner):
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output


class TestPresets:
    """Tests for JSON presets."""

    def test_preset_with_sources(self, runner, tmp_path):
        preset = tmp_path / "preset.json"
        preset.write_text(
            json.dumps(
                {
                    "size": 120,
                    "resolution": 6,
                    "amplitude": 0.5,
                    "sources": [{"x": 10, "y": 0, "amplitude": 1.0}, [-20, 5, 0.5]],
                }
            )
        )
        output = tmp_path / "preset.stl"

        result = runner.invoke(main, ["--preset", str(preset), "-o", str(output)])

        assert result.exit_code == 0, result.output
        assert output.exists()
        assert "Source 2" in result.output

    def test_options_override_preset(self, runner, tmp_path):
        preset = tmp_path / "preset.json"
        preset.write_text(json.dumps({"resolution": 50, "amplitude": 0}))
        output = tmp_path / "override.stl"

        result = runner.invoke(
            main, ["--preset", str(preset), "-r", "4", "-s", "0", "0", "1", "-o", str(output)]
        )

        assert result.exit_code == 0, result.output
        assert output.stat().st_size == 84 + 50 * 80

    def test_invalid_json(self, runner, tmp_path):
        preset = tmp_path / "broken.json"
        preset.write_text("{not json")

        result = runner.invoke(main, ["--preset", str(preset), "--dry-run"])

        assert result.exit_code == 1
        assert "Error" in result.output

    def test_load_preset(self, tmp_path):
        preset = tmp_path / "preset.json"
        preset.write_text(json.dumps({"thickness": 3, "sources": [[1, 2, 0.5]]}))

        settings, sources = load_preset(preset)

        assert settings == {"thickness": 3}
        assert sources == [WaveSource(1.0, 2.0, 0.5)]

    def test_load_preset_without_sources(self, tmp_path):
        preset = tmp_path / "preset.json"
        preset.write_text(json.dumps({"size": 150}))
        assert load_preset(preset) == ({"size": 150}, None)

    def test_load_preset_rejects_bad_source(self, tmp_path):
        preset = tmp_path / "preset.json"
        preset.write_text(json.dumps({"sources": [[1, 2]]}))
        with pytest.raises(ValueError, match="invalid source"):
            load_preset(preset)


class TestFormatting:
    """Tests for display helpers."""

    @pytest.mark.parametrize(
        "seconds,expected",
        [(0.35, "350 ms"), (12.44, "12.4s"), (83, "1m 23s")],
    )
    def test_format_time(self, seconds, expected):
        assert format_time(seconds) == expected

    @pytest.mark.parametrize(
        "num_bytes,expected",
        [(4084, "4.0 KB"), (512, "512.0 B"), (3 * 1024**2, "3.0 MB")],
    )
    def test_format_bytes(self, num_bytes, expected):
        assert format_bytes(num_bytes) == expected
