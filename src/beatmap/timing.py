"""
Timing point data structure and tempo resolution.

A timing point either sets an absolute tempo (positive ms per beat) or
scales the most recent absolute tempo by a scroll-velocity multiplier
(negative ms per beat, multiplier = -100 / ms_per_beat).
"""

import math
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from .errors import ChartFormatError


def format_number(value: float) -> str:
    """Format a float the way chart files store it (no trailing '.0')."""
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


@dataclass
class TimingPoint:
    """
    Represents a single timing point.

    Attributes:
        offset: Start of the point in milliseconds
        ms_per_beat: Beat length (> 0) or negative scroll-velocity value (< 0)
        meter: Beats per measure
        sample_set: Default sample set
        sample_index: Custom sample index
        volume: Hit sound volume (0-100)
        inherited: True for scroll-velocity points
        effects: Effect bit flags (kiai, omitted barline)
        field_count: Number of fields present on the source line
    """
    offset: float
    ms_per_beat: float
    meter: int = 4
    sample_set: int = 0
    sample_index: int = 0
    volume: int = 100
    inherited: bool = False
    effects: int = 0
    field_count: int = 8

    @property
    def is_uninherited(self) -> bool:
        """True if this point defines a new absolute tempo."""
        return self.ms_per_beat > 0

    @property
    def bpm(self) -> Optional[float]:
        """Tempo in BPM for absolute points, None for scroll-velocity points."""
        if not self.is_uninherited:
            return None
        return 60000.0 / self.ms_per_beat

    @property
    def sv_multiplier(self) -> float:
        """Scroll-velocity multiplier applied to the governing tempo."""
        if self.ms_per_beat < 0:
            return -100.0 / self.ms_per_beat
        return 1.0

    @classmethod
    def parse(cls, line: str) -> 'TimingPoint':
        """
        Parse a timing point from a ``[TimingPoints]`` line.

        Args:
            line: Comma separated timing point line

        Returns:
            Parsed TimingPoint

        Raises:
            ChartFormatError: If the line is not a valid timing point
        """
        fields = [f.strip() for f in line.strip().split(',')]
        if len(fields) < 2:
            raise ChartFormatError(f"Invalid timing point: {line!r}")

        try:
            offset = float(fields[0])
            ms_per_beat = float(fields[1])
            meter = int(fields[2]) if len(fields) > 2 else 4
            sample_set = int(fields[3]) if len(fields) > 3 else 0
            sample_index = int(fields[4]) if len(fields) > 4 else 0
            volume = int(fields[5]) if len(fields) > 5 else 100
            uninherited = int(fields[6]) if len(fields) > 6 else int(ms_per_beat > 0)
            effects = int(fields[7]) if len(fields) > 7 else 0
        except ValueError:
            raise ChartFormatError(f"Invalid timing point: {line!r}")

        return cls(
            offset=offset,
            ms_per_beat=ms_per_beat,
            meter=meter,
            sample_set=sample_set,
            sample_index=sample_index,
            volume=volume,
            inherited=not uninherited,
            effects=effects,
            field_count=len(fields),
        )

    def pack(self) -> str:
        """Serialize back to a ``[TimingPoints]`` line."""
        fields = [
            format_number(self.offset),
            format_number(self.ms_per_beat),
            str(self.meter),
            str(self.sample_set),
            str(self.sample_index),
            str(self.volume),
            '0' if self.inherited else '1',
            str(self.effects),
        ]
        return ','.join(fields[:max(2, self.field_count)])

    def __str__(self) -> str:
        return self.pack()


def timing_point_at(points: Sequence[TimingPoint], time: float) -> Optional[TimingPoint]:
    """
    Find the timing point in effect at ``time``.

    Scans from the end so that, among points sharing an offset, the one
    declared last in the document wins.
    """
    for point in reversed(points):
        if math.floor(point.offset) <= time:
            return point
    return None


def main_bpm(points: Sequence[TimingPoint], end_time: Optional[float]) -> Optional[float]:
    """
    Compute the BPM that is in effect for the longest total time.

    Args:
        points: Timing points in document order
        end_time: Time the last absolute tempo lasts until (usually the
            time of the final hit object)

    Returns:
        Main BPM, or None if there is no absolute timing point
    """
    absolute: List[TimingPoint] = [p for p in points if p.is_uninherited]
    if not absolute:
        return None

    durations: Dict[float, float] = {}
    for i, point in enumerate(absolute):
        if i + 1 < len(absolute):
            until = absolute[i + 1].offset
        else:
            until = end_time if end_time is not None else point.offset
        durations[point.ms_per_beat] = durations.get(point.ms_per_beat, 0.0) + (until - point.offset)

    best_ms_per_beat = None
    best_duration = -math.inf
    for ms_per_beat, duration in durations.items():
        if duration > best_duration:
            best_ms_per_beat, best_duration = ms_per_beat, duration

    return 60000.0 / best_ms_per_beat
