"""
Tests for Quantizer class.
"""

import pytest
from src.converter.quantizer import Quantizer, QuantizationConfig, round_half_up


class TestFindOffsetBPM:
    """Test integer BPM search."""

    def test_exact_grid(self):
        """Test 1000ms offset lands exactly on the 120 BPM grid."""
        bpm, error = Quantizer().find_offset_bpm(1000)
        assert bpm == 120
        assert error == 0

    def test_first_candidate_wins_ties(self):
        """Test an offset of zero matches every BPM, lowest wins."""
        bpm, error = Quantizer().find_offset_bpm(0)
        assert bpm == 100
        assert error == 0

    def test_error_is_circular_distance(self):
        config = QuantizationConfig(min_bpm=120, max_bpm=120)
        bpm, error = Quantizer(config).find_offset_bpm(1490)
        assert bpm == 120
        assert error == pytest.approx(10.0)

    def test_result_within_range(self):
        bpm, error = Quantizer().find_offset_bpm(1234.5)
        assert 100 <= bpm <= 255
        assert error >= 0


class TestSnapping:
    """Test beat snapping and lane mapping."""

    def test_offset_beat(self):
        assert Quantizer().offset_beat(1000, 120) == 2

    def test_snap_half_beat(self):
        """Test 250ms after the reference at 500ms per beat is half a beat."""
        assert Quantizer().snap_beat(1250, 1000, 500, 2) == 2.5

    def test_snap_to_48th(self):
        # 10ms at 500ms/beat = 0.96 grid steps -> 1/48
        assert Quantizer().snap_beat(1010, 1000, 500, 0) == pytest.approx(1 / 48)

    def test_snap_before_reference(self):
        assert Quantizer().snap_beat(750, 1000, 500, 2) == 1.5

    def test_lane_mapping(self):
        quantizer = Quantizer()
        assert quantizer.lane_for(0) == 1
        assert quantizer.lane_for(256) == 4
        assert quantizer.lane_for(511) == 7

    def test_lane_not_clamped(self):
        assert Quantizer().lane_for(600) == 9

    def test_round_half_up(self):
        assert round_half_up(0.5) == 1
        assert round_half_up(2.5) == 3
        assert round_half_up(-2.5) == -2


class TestQuantizationConfig:
    """Test quantization configuration."""

    def test_default_config(self):
        config = QuantizationConfig()
        assert config.snap_divisor == 48
        assert config.min_bpm == 100
        assert config.max_bpm == 255
        assert config.lane_count == 7
        assert config.playfield_width == 512
