"""
Tests for output chart records.
"""

import pytest
from src.converter.note import TimingMarker, SingleNote, SlideNote, SlidePos, json_number


class TestRecords:
    """Test record serialization."""

    def test_timing_marker(self):
        assert TimingMarker(120, 0).to_dict() == {
            'type': 'System', 'cmd': 'BPM', 'bpm': 120, 'beat': 0,
        }

    def test_single_note_without_flick(self):
        result = SingleNote(3, 2.5).to_dict()
        assert result == {'type': 'Note', 'note': 'Single', 'lane': 3, 'beat': 2.5}
        assert 'flick' not in result

    def test_single_note_with_flick(self):
        assert SingleNote(1, 4.0, flick=True).to_dict()['flick'] is True

    def test_slide_start_and_end(self):
        start = SlideNote(SlidePos.A, 2, 1.0, start=True).to_dict()
        end = SlideNote(SlidePos.B, 2, 3.5, end=True).to_dict()
        assert start == {'type': 'Note', 'note': 'Slide', 'pos': 'A', 'lane': 2, 'beat': 1, 'start': True}
        assert end == {'type': 'Note', 'note': 'Slide', 'pos': 'B', 'lane': 2, 'beat': 3.5, 'end': True}

    def test_slide_needs_one_flag(self):
        with pytest.raises(ValueError):
            SlideNote(SlidePos.A, 1, 0.0)
        with pytest.raises(ValueError):
            SlideNote(SlidePos.A, 1, 0.0, start=True, end=True)

    def test_integral_beats_become_ints(self):
        assert json_number(2.0) == 2
        assert isinstance(json_number(2.0), int)
        assert json_number(2.25) == 2.25
