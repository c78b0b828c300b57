"""
Tests for the conversion CLI.
"""

import json
import pytest
from src.converter.cli import main


CHART = """osu file format v14

[TimingPoints]
1000,500,4,2,0,60,1,0

[HitObjects]
256,192,1250,1,2,0:0:0:0:
64,192,1000,128,0,2000:0:0:0:0:
"""


@pytest.fixture
def chart_path(tmp_path):
    path = tmp_path / "Artist - Song (Mapper) [Hard].osu"
    path.write_text(CHART, encoding="utf-8")
    return path


class TestCLI:
    """Test command line conversion."""

    def test_convert_to_file(self, chart_path, tmp_path):
        output_path = tmp_path / "chart.json"

        assert main(["--input", str(chart_path), "--output", str(output_path)]) == 0

        data = json.loads(output_path.read_text(encoding="utf-8"))
        assert data[2] == {"type": "Note", "note": "Single", "lane": 4, "beat": 2.5, "flick": True}
        assert data[3]["note"] == "Slide"

    def test_convert_to_stdout(self, chart_path, capsys):
        assert main(["--input", str(chart_path)]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data[0]["cmd"] == "BPM"

    def test_flags_override_config(self, chart_path, capsys):
        assert main(["--input", str(chart_path), "--no-holds", "--no-flicks"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert [d["note"] for d in data[2:]] == ["Single", "Single"]
        assert "flick" not in data[2]

    def test_output_dir_with_diff_name(self, chart_path, tmp_path):
        out_dir = tmp_path / "charts"
        code = main([
            "--input", str(chart_path),
            "--output-dir", str(out_dir),
            "--append-diff-name", "converted",
        ])
        assert code == 0
        assert (out_dir / "Artist - Song (Mapper) [Hard converted].json").exists()

    def test_latin1_chart(self, tmp_path, capsys):
        path = tmp_path / "legacy.osu"
        path.write_bytes(CHART.replace("[TimingPoints]", "[Metadata]\nTitle:Caf\xe9\n\n[TimingPoints]").encode("latin-1"))
        assert main(["--input", str(path)]) == 0
        assert json.loads(capsys.readouterr().out)[0]["cmd"] == "BPM"

    def test_missing_input(self, tmp_path):
        assert main(["--input", str(tmp_path / "missing.osu")]) == 1

    def test_invalid_chart(self, tmp_path):
        path = tmp_path / "broken.osu"
        path.write_text("osu file format v14\n", encoding="utf-8")
        assert main(["--input", str(path)]) == 1
