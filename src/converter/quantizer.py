"""
Tempo quantization and beat snapping.

The target format only knows integer BPMs on a beat grid, while chart files
store exact millisecond offsets. The quantizer picks an integer BPM whose
beat grid passes closest to the reference offset, then snaps times to a
fraction of a beat.
"""

import math
from dataclasses import dataclass
from typing import Tuple

import numpy as np


def round_half_up(value: float) -> int:
    """Round .5 away from negative infinity (not banker's rounding)."""
    return math.floor(value + 0.5)


@dataclass
class QuantizationConfig:
    """Configuration for tempo quantization and lane mapping."""
    snap_divisor: int = 48  # Grid subdivisions per beat
    min_bpm: int = 100
    max_bpm: int = 255
    lane_count: int = 7
    playfield_width: int = 512


class Quantizer:
    """
    Snaps chart times onto the target beat grid.
    """

    def __init__(self, config: QuantizationConfig = None):
        """
        Initialize quantizer.

        Args:
            config: Quantization configuration
        """
        self.config = config or QuantizationConfig()

    def find_offset_bpm(self, offset: float) -> Tuple[int, float]:
        """
        Search the integer BPM whose beat grid best matches an offset.

        Args:
            offset: Reference offset in milliseconds

        Returns:
            (bpm, error) where error is the distance in ms from the offset
            to the nearest beat boundary; the lowest BPM wins ties
        """
        candidates = np.arange(self.config.min_bpm, self.config.max_bpm + 1)
        ms_per_beat = 60000.0 / candidates
        remainder = np.mod(offset, ms_per_beat)
        errors = np.minimum(remainder, ms_per_beat - remainder)

        best = int(np.argmin(errors))
        return int(candidates[best]), float(errors[best])

    def offset_beat(self, offset: float, bpm: int) -> int:
        """Beat index of ``offset`` on the grid of ``bpm``."""
        return round_half_up(offset / (60000.0 / bpm))

    def snap_beat(self, time: float, reference_offset: float,
                  reference_ms_per_beat: float, offset_beat: int) -> float:
        """
        Snap a time onto the beat grid.

        Args:
            time: Time in milliseconds
            reference_offset: Offset of the reference timing point
            reference_ms_per_beat: Beat length of the reference timing point
            offset_beat: Beat at which the reference point sits

        Returns:
            Beat position rounded to 1/snap_divisor of a beat
        """
        divisor = self.config.snap_divisor
        grid = round_half_up(divisor * (time - reference_offset) / reference_ms_per_beat)
        return grid / divisor + offset_beat

    def lane_for(self, x: float) -> int:
        """Map a playfield x position to a 1-based lane (not clamped)."""
        return round_half_up(self.config.lane_count * x / self.config.playfield_width + 0.5)
