"""
Beatmap module for osu2chart.

Parses chart documents and models their timing points and hit objects.
"""

from .errors import ChartFormatError
from .timing import TimingPoint, timing_point_at, main_bpm
from .hit_objects import (
    HitObjectKind,
    HitObject,
    HitCircle,
    Slider,
    Spinner,
    HoldNote,
    parse_hit_object,
    slider_combo,
    combo_at,
)
from .document import ChartDocument
from .loader import read_chart_text, fetch_chart_text

__all__ = [
    'ChartFormatError',
    'TimingPoint',
    'timing_point_at',
    'main_bpm',
    'HitObjectKind',
    'HitObject',
    'HitCircle',
    'Slider',
    'Spinner',
    'HoldNote',
    'parse_hit_object',
    'slider_combo',
    'combo_at',
    'ChartDocument',
    'read_chart_text',
    'fetch_chart_text',
]
