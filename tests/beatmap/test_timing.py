"""
Tests for TimingPoint and tempo resolution.
"""

import pytest
from src.beatmap.errors import ChartFormatError
from src.beatmap.timing import TimingPoint, timing_point_at, main_bpm


class TestTimingPointParsing:
    """Test timing point parsing and packing."""

    def test_parse_uninherited(self):
        point = TimingPoint.parse("1000,500,4,2,1,60,1,1")
        assert point.offset == 1000
        assert point.ms_per_beat == 500
        assert point.meter == 4
        assert point.sample_set == 2
        assert point.sample_index == 1
        assert point.volume == 60
        assert point.inherited is False
        assert point.effects == 1

    def test_parse_inherited(self):
        point = TimingPoint.parse("3000,-50,4,2,0,60,0,0")
        assert point.inherited is True
        assert point.is_uninherited is False
        assert point.sv_multiplier == pytest.approx(2.0)
        assert point.bpm is None

    def test_parse_short_legacy_line(self):
        """Test old two-field lines keep their width when packed."""
        point = TimingPoint.parse("120.5,333.33")
        assert point.bpm == pytest.approx(180.0, abs=0.01)
        assert point.pack() == "120.5,333.33"

    def test_pack_round_trip(self):
        line = "1000,500,4,2,0,60,1,0"
        assert TimingPoint.parse(line).pack() == line

    def test_invalid_line(self):
        with pytest.raises(ChartFormatError):
            TimingPoint.parse("garbage")
        with pytest.raises(ChartFormatError):
            TimingPoint.parse("abc,500")


class TestTimingPointAt:
    """Test effective timing point lookup."""

    def test_before_first_point(self):
        assert timing_point_at([TimingPoint(100, 500)], 50) is None

    def test_offset_is_floored(self):
        point = TimingPoint(100.7, 500)
        assert timing_point_at([point], 100) is point

    def test_later_point_on_same_offset_wins(self):
        """Test document order breaks ties."""
        red = TimingPoint(1000, 500)
        green = TimingPoint(1000, -50, inherited=True)
        assert timing_point_at([red, green], 1000) is green


class TestMainBPM:
    """Test main BPM statistics."""

    def test_longest_tempo_wins(self):
        points = [TimingPoint(0, 500), TimingPoint(1000, 250), TimingPoint(2000, 500)]
        # 500ms: 1000 + 3000, 250ms: 1000
        assert main_bpm(points, 5000) == pytest.approx(120.0)

    def test_inherited_points_ignored(self):
        points = [TimingPoint(0, 500), TimingPoint(500, -50, inherited=True), TimingPoint(4000, 250)]
        assert main_bpm(points, 5000) == pytest.approx(120.0)

    def test_tie_keeps_first(self):
        """Test equal durations select the earlier tempo."""
        points = [TimingPoint(0, 500), TimingPoint(1000, 250)]
        assert main_bpm(points, 2000) == pytest.approx(120.0)

    def test_no_absolute_points(self):
        assert main_bpm([TimingPoint(0, -100, inherited=True)], 1000) is None

    def test_no_end_time(self):
        assert main_bpm([TimingPoint(0, 400)], None) == pytest.approx(150.0)
