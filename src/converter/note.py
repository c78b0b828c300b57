"""
Output records of the converted chart.

Each record serializes to one JSON object of the target chart format.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Union


def json_number(value: float) -> Union[int, float]:
    """Emit integral beats as JSON integers."""
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


class SlidePos(Enum):
    """Sustain track identifiers."""
    A = "A"
    B = "B"


@dataclass
class TimingMarker:
    """BPM change at a beat position."""
    bpm: int
    beat: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            'type': 'System',
            'cmd': 'BPM',
            'bpm': int(self.bpm),
            'beat': json_number(self.beat),
        }


@dataclass
class SingleNote:
    """
    Instantaneous tap note.

    Attributes:
        lane: Keyboard lane (1-7 for in-range input)
        beat: Beat position
        flick: True if the note must be flicked
    """
    lane: int
    beat: float
    flick: bool = False

    def to_dict(self) -> Dict[str, Any]:
        result = {
            'type': 'Note',
            'note': 'Single',
            'lane': int(self.lane),
            'beat': json_number(self.beat),
        }
        if self.flick:
            result['flick'] = True
        return result


@dataclass
class SlideNote:
    """
    Start or end point of a sustained note on track A or B.

    Attributes:
        pos: Sustain track
        lane: Keyboard lane
        beat: Beat position
        start: True for the opening point
        end: True for the closing point
    """
    pos: SlidePos
    lane: int
    beat: float
    start: bool = False
    end: bool = False

    def __post_init__(self):
        """Validate that exactly one of start/end is set."""
        if self.start == self.end:
            raise ValueError("SlideNote needs exactly one of start or end")

    def to_dict(self) -> Dict[str, Any]:
        result = {
            'type': 'Note',
            'note': 'Slide',
            'pos': self.pos.value,
            'lane': int(self.lane),
            'beat': json_number(self.beat),
        }
        if self.start:
            result['start'] = True
        if self.end:
            result['end'] = True
        return result


ChartRecord = Union[TimingMarker, SingleNote, SlideNote]
