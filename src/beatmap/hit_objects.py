"""
Hit object data structures and combo counting.

Hit objects are a tagged family sharing a common base payload. The variant
is picked from the type bits when a line is parsed, and every consumer
dispatches on ``HitObject.kind``.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, ClassVar, List, Optional, Sequence

from .errors import ChartFormatError
from .timing import TimingPoint, format_number, timing_point_at


# Hit-sound bit honoured as "finish" by the chart converter
FINISH_HITSOUND = 2

NEW_COMBO_BIT = 4


class HitObjectKind(Enum):
    """Hit object variants, valued by their type bit."""
    CIRCLE = 1
    SLIDER = 2
    SPINNER = 8
    HOLD = 128


@dataclass
class HitObject:
    """
    Shared payload of every hit object.

    Attributes:
        x: Horizontal playfield position (0-512)
        y: Vertical playfield position (0-384)
        time: Hit time in milliseconds
        hit_sound: Hit-sound bit flags
        type_bits: Raw type field (variant bit plus combo flags)
    """
    kind: ClassVar[HitObjectKind]

    x: int
    y: int
    time: int
    hit_sound: int = 0
    type_bits: int = 0

    def __post_init__(self):
        if not self.type_bits & self.kind.value:
            self.type_bits |= self.kind.value

    @property
    def new_combo(self) -> bool:
        return bool(self.type_bits & NEW_COMBO_BIT)

    def _head(self) -> List[str]:
        return [
            str(self.x),
            str(self.y),
            str(self.time),
            str(self.type_bits),
            str(self.hit_sound),
        ]

    def pack(self) -> str:
        raise NotImplementedError

    def __str__(self) -> str:
        return self.pack()


@dataclass
class HitCircle(HitObject):
    """Instantaneous note."""
    kind: ClassVar[HitObjectKind] = HitObjectKind.CIRCLE

    extras: List[str] = field(default_factory=list)

    def pack(self) -> str:
        return ','.join(self._head() + self.extras)


@dataclass
class Slider(HitObject):
    """
    Slider following a curve.

    Attributes:
        curve: Raw curve description (type and control points)
        repeat: Number of traversals of the curve
        pixel_length: Length of one traversal in osu! pixels
        extras: Raw edge sounds, edge sets and hit sample fields
    """
    kind: ClassVar[HitObjectKind] = HitObjectKind.SLIDER

    curve: str = 'L'
    repeat: int = 1
    pixel_length: float = 0.0
    extras: List[str] = field(default_factory=list)

    def pack(self) -> str:
        body = [self.curve, str(self.repeat), format_number(self.pixel_length)]
        return ','.join(self._head() + body + self.extras)


@dataclass
class Spinner(HitObject):
    """Spinner lasting until ``end_time``."""
    kind: ClassVar[HitObjectKind] = HitObjectKind.SPINNER

    end_time: int = 0
    extras: List[str] = field(default_factory=list)

    def pack(self) -> str:
        return ','.join(self._head() + [str(self.end_time)] + self.extras)


@dataclass
class HoldNote(HitObject):
    """Sustained lane note lasting until ``end_time``."""
    kind: ClassVar[HitObjectKind] = HitObjectKind.HOLD

    end_time: int = 0
    hit_sample: Optional[str] = '0:0:0:0:'

    def pack(self) -> str:
        # end time and hit sample share one field, joined with ':'
        tail = str(self.end_time)
        if self.hit_sample is not None:
            tail = f"{tail}:{self.hit_sample}"
        return ','.join(self._head() + [tail])


def _to_int(raw: str, name: str, line: str) -> int:
    try:
        return int(float(raw))
    except (ValueError, OverflowError):
        raise ChartFormatError(f"{name} should be a number, got {raw!r} in {line!r}")


def parse_hit_object(line: str) -> HitObject:
    """
    Parse a hit object from a ``[HitObjects]`` line.

    Args:
        line: Comma separated hit object line

    Returns:
        The concrete HitObject variant selected by the type bits

    Raises:
        ChartFormatError: If the line is not a valid hit object
    """
    line = line.strip()
    fields = line.split(',')
    if len(fields) < 5:
        raise ChartFormatError(f"Not enough fields in hit object: {line!r}")

    x = _to_int(fields[0], 'x', line)
    y = _to_int(fields[1], 'y', line)
    time = _to_int(fields[2], 'time', line)
    type_bits = _to_int(fields[3], 'type', line)
    hit_sound = _to_int(fields[4], 'hitSound', line)
    rest = fields[5:]

    if type_bits & HitObjectKind.CIRCLE.value:
        return HitCircle(x, y, time, hit_sound, type_bits, extras=rest)

    if type_bits & HitObjectKind.SLIDER.value:
        if len(rest) < 3:
            raise ChartFormatError(f"Slider is missing curve, repeat or length: {line!r}")
        try:
            pixel_length = float(rest[2])
        except ValueError:
            raise ChartFormatError(f"pixelLength should be a number, got {rest[2]!r}")
        return Slider(
            x, y, time, hit_sound, type_bits,
            curve=rest[0],
            repeat=_to_int(rest[1], 'slides', line),
            pixel_length=pixel_length,
            extras=rest[3:],
        )

    if type_bits & HitObjectKind.SPINNER.value:
        if not rest:
            raise ChartFormatError(f"Spinner is missing endTime: {line!r}")
        return Spinner(
            x, y, time, hit_sound, type_bits,
            end_time=_to_int(rest[0], 'endTime', line),
            extras=rest[1:],
        )

    if type_bits & HitObjectKind.HOLD.value:
        if not rest:
            raise ChartFormatError(f"Hold note is missing endTime: {line!r}")
        end_raw, sep, hit_sample = ','.join(rest).partition(':')
        return HoldNote(
            x, y, time, hit_sound, type_bits,
            end_time=_to_int(end_raw, 'endTime', line),
            hit_sample=hit_sample if sep else None,
        )

    raise ChartFormatError(f"Unknown hit object type {type_bits} in {line!r}")


def slider_combo(
    slider: Slider,
    slider_multiplier: float,
    slider_tick_rate: float,
    version: int,
    timing_point: Optional[TimingPoint],
) -> int:
    """
    Combo awarded by a slider: head, ticks, repeats and tail.

    Returns ``ticks * repeat + repeat + 1``. Charts older than format v8
    ignore the scroll-velocity multiplier when measuring slider length.
    """
    sv_multiplier = timing_point.sv_multiplier if timing_point is not None else 1.0

    epsilon = 0.1
    if version < 8:
        pixels_per_beat = slider_multiplier * 100.0
    else:
        pixels_per_beat = slider_multiplier * 100.0 * sv_multiplier

    num_beats = slider.pixel_length * slider.repeat / pixels_per_beat
    ticks = math.ceil((num_beats - epsilon) / slider.repeat * slider_tick_rate) - 1
    ticks = max(0, ticks)

    return ticks * slider.repeat + slider.repeat + 1


def combo_at(
    objects: Sequence[HitObject],
    timing_points: Sequence[TimingPoint],
    time: float,
    slider_multiplier: float,
    slider_tick_rate: float,
    get_version: Callable[[], int],
) -> int:
    """
    Replay the combo counter over every object hit before ``time``.

    Args:
        objects: Hit objects of the chart
        timing_points: Timing points in document order
        time: Exclusive cutoff in milliseconds
        slider_multiplier: Difficulty ``SliderMultiplier``
        slider_tick_rate: Difficulty ``SliderTickRate``
        get_version: Resolves the chart format version; only called once a
            slider is met

    Returns:
        Combo reached just before ``time``
    """
    combo = 0
    version = None

    for obj in objects:
        if obj.time >= time:
            continue

        if obj.kind is HitObjectKind.CIRCLE:
            combo += 1
        elif obj.kind is HitObjectKind.SLIDER:
            if version is None:
                version = get_version()
            combo += slider_combo(
                obj,
                slider_multiplier,
                slider_tick_rate,
                version,
                timing_point_at(timing_points, obj.time),
            )
        elif obj.kind is HitObjectKind.SPINNER:
            combo += 1
        elif obj.kind is HitObjectKind.HOLD:
            combo += 1

    return combo
