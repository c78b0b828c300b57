"""
Chart document: a mutable, line based view of a beatmap file.

The document's lines are the single source of truth. Timing points and hit
objects are parsed from them on every call and written back by splicing
the section's line range.
"""

import logging
import re
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Tuple, TypeVar, Union

from .errors import ChartFormatError
from .hit_objects import HitObject, combo_at, parse_hit_object
from .loader import read_chart_text
from .timing import TimingPoint, main_bpm, timing_point_at


logger = logging.getLogger(__name__)

T = TypeVar('T')

TIMING_POINTS_SECTION = '[TimingPoints]'
HIT_OBJECTS_SECTION = '[HitObjects]'


class ChartDocument:
    """
    Line based chart document.

    Attributes:
        lines: Raw text lines, without newline characters
        filename: File name of the chart, if loaded from disk
        dirname: Name of the folder holding the chart
        songs_directory: Parent directory of that folder
    """

    def __init__(
        self,
        lines: Optional[List[str]] = None,
        filename: Optional[str] = None,
        dirname: Optional[str] = None,
        songs_directory: Optional[str] = None,
    ):
        self.lines: List[str] = lines if lines is not None else []
        self.filename = filename
        self.dirname = dirname
        self.songs_directory = songs_directory

    @classmethod
    def parse(cls, data: Union[bytes, str], **kwargs) -> 'ChartDocument':
        """
        Build a document from raw file contents.

        Never fails: text without the expected sections simply yields empty
        timing point and hit object lists.
        """
        if isinstance(data, bytes):
            data = data.decode('utf-8', errors='replace')
        return cls(data.split('\n'), **kwargs)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> 'ChartDocument':
        """
        Load a document from disk.

        Raises:
            OSError: If the file cannot be read
        """
        path = Path(path)
        text = read_chart_text(path)
        return cls.parse(
            text,
            filename=path.name,
            dirname=path.parent.name,
            songs_directory=str(path.parent.parent),
        )

    # Header and properties

    def get_version(self) -> int:
        """
        Chart format version from the first line (``osu file format v14``).

        Raises:
            ChartFormatError: If the first line holds no number
        """
        first = self.lines[0] if self.lines else ''
        match = re.search(r'\d+', first)
        if match is None:
            raise ChartFormatError(f"No format version in header line: {first!r}")
        return int(match.group(0))

    def set_version(self, version: int) -> None:
        """Rewrite the header line for the given format version."""
        header = f"osu file format v{version}"
        if self.lines:
            self.lines[0] = header
        else:
            self.lines.append(header)

    def _find_line(self, prefix: str) -> Optional[int]:
        for i, line in enumerate(self.lines):
            if line.startswith(prefix):
                return i
        return None

    def get_property(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """
        Value of the first line starting with ``name``.

        Args:
            name: Property key, e.g. ``SliderMultiplier``
            default: Returned when no line matches

        Returns:
            Text after the first ':' with surrounding whitespace removed
        """
        index = self._find_line(name)
        if index is None:
            return default
        line = self.lines[index]
        return line[line.find(':') + 1:].strip()

    def set_property(self, name: str, value) -> bool:
        """
        Replace the value of an existing property.

        The key text is kept verbatim. Absent properties are not inserted.

        Returns:
            True if a line was updated, False if the property was not found
        """
        index = self._find_line(name)
        if index is None:
            logger.debug(f"Property not found, nothing to set: {name}")
            return False
        line = self.lines[index]
        colon = line.find(':')
        key = line[:colon] if colon >= 0 else line
        self.lines[index] = f"{key}: {value}"
        return True

    # Sections

    def _section_range(self, header: str) -> Optional[Tuple[int, int]]:
        """Line range strictly between ``header`` and the next header."""
        start = self._find_line(header)
        if start is None:
            return None
        end = len(self.lines)
        for i in range(start + 1, len(self.lines)):
            if self.lines[i].startswith('['):
                end = i
                break
        return start + 1, end

    def _read_section(self, header: str, parse: Callable[[str], T]) -> List[T]:
        bounds = self._section_range(header)
        if bounds is None:
            return []
        start, end = bounds
        return [parse(line) for line in self.lines[start:end] if line.strip() != '']

    def _write_section(self, header: str, packed: Sequence[str]) -> None:
        bounds = self._section_range(header)
        if bounds is None:
            logger.debug(f"Section not found, nothing written: {header}")
            return
        start, end = bounds
        self.lines[start:end] = list(packed) + ['']

    def get_timing_points(self) -> List[TimingPoint]:
        """Timing points in document order."""
        return self._read_section(TIMING_POINTS_SECTION, TimingPoint.parse)

    def set_timing_points(self, timing_points: Sequence[TimingPoint]) -> None:
        """Replace the timing point section, sorted by offset."""
        ordered = sorted(timing_points, key=lambda p: p.offset)
        self._write_section(TIMING_POINTS_SECTION, [p.pack() for p in ordered])

    def get_hit_objects(self) -> List[HitObject]:
        """Hit objects in document order."""
        return self._read_section(HIT_OBJECTS_SECTION, parse_hit_object)

    def set_hit_objects(self, hit_objects: Sequence[HitObject]) -> None:
        """Replace the hit object section, sorted by time."""
        ordered = sorted(hit_objects, key=lambda o: o.time)
        self._write_section(HIT_OBJECTS_SECTION, [o.pack() for o in ordered])

    # Timing queries

    def get_timing_point_at(self, time: float) -> Optional[TimingPoint]:
        """Timing point in effect at ``time`` (ms), or None before the first one."""
        return timing_point_at(self.get_timing_points(), time)

    def get_main_bpm(self) -> Optional[float]:
        """BPM in effect for the longest part of the chart."""
        points = self.get_timing_points()
        hit_objects = self.get_hit_objects()
        end_time = hit_objects[-1].time if hit_objects else None
        return main_bpm(points, end_time)

    def get_combo_at(self, time: float) -> int:
        """Combo reached by the objects hit before ``time`` (ms)."""
        slider_multiplier = float(self.get_property('SliderMultiplier', '1.4'))
        slider_tick_rate = float(self.get_property('SliderTickRate', '1'))
        return combo_at(
            self.get_hit_objects(),
            self.get_timing_points(),
            time,
            slider_multiplier,
            slider_tick_rate,
            self.get_version,
        )

    # File naming

    def append_to_diff_name(self, postfix: str) -> None:
        """Append ``postfix`` inside the difficulty brackets of the file name."""
        if self.filename is None:
            return
        cut = self.filename.rfind(']')
        if cut < 0:
            cut = len(self.filename)
        self.filename = f"{self.filename[:cut]} {postfix}].osu"

    # Serialization

    def to_string(self) -> str:
        return '\n'.join(self.lines)

    def __str__(self) -> str:
        return self.to_string()

    def clone(self) -> 'ChartDocument':
        """Copy with an independent line list."""
        return ChartDocument(
            list(self.lines),
            filename=self.filename,
            dirname=self.dirname,
            songs_directory=self.songs_directory,
        )
