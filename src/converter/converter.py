"""
Chart conversion pipeline.

Turns a chart document into the target note list:
1. Take the first timing point as the tempo reference
2. Quantize its tempo to an integer BPM grid
3. Emit the leading BPM markers
4. Convert hit objects to lanes and snapped beats, packing hold notes
   onto the two sustain tracks
5. Serialize to a JSON array
"""

import json
import logging
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

from src.beatmap import ChartDocument, ChartFormatError, HitObjectKind
from src.beatmap.hit_objects import FINISH_HITSOUND
from .note import ChartRecord, SingleNote, SlideNote, SlidePos, TimingMarker, json_number
from .quantizer import QuantizationConfig, Quantizer, round_half_up


logger = logging.getLogger(__name__)

DiagnosticSink = Callable[[str], None]


@dataclass
class ConversionOptions:
    """User toggles for a conversion."""
    convert_holds: bool = True  # Hold notes become slides instead of singles
    flick_finishes: bool = True  # Finish hit sound marks a flick


class SustainTracks:
    """
    Greedy allocator for the two sustain tracks.

    Keeps the end beat of the last slide placed on each track. A hold goes
    to A if A ended strictly before it starts, otherwise to B under the same
    rule, otherwise nowhere.
    """

    def __init__(self):
        self.last_a = -math.inf
        self.last_b = -math.inf

    def allocate(self, start_beat: float, end_beat: float) -> Optional[SlidePos]:
        """
        Reserve a track for ``[start_beat, end_beat]``.

        Returns:
            The track used, or None if both are still busy
        """
        if self.last_a < start_beat:
            self.last_a = end_beat
            return SlidePos.A
        if self.last_b < start_beat:
            self.last_b = end_beat
            return SlidePos.B
        return None


@dataclass
class ConversionResult:
    """Converted records plus the diagnostics raised while converting."""
    notes: List[ChartRecord] = field(default_factory=list)
    diagnostics: List[str] = field(default_factory=list)
    offset_bpm: Optional[int] = None
    offset_error: Optional[float] = None

    def to_list(self) -> List[Dict[str, Any]]:
        return [note.to_dict() for note in self.notes]

    def to_json(self) -> str:
        """Compact JSON array of the records."""
        return json.dumps(self.to_list(), separators=(',', ':'), ensure_ascii=False)


def _log_diagnostic(message: str) -> None:
    logger.warning(message)


class ChartConverter:
    """
    Converts chart documents into the lane/beat note format.

    Only the first timing point is used as the tempo reference. Later tempo
    changes are ignored, so multi-BPM charts drift off the grid.
    """

    def __init__(self, options: Optional[ConversionOptions] = None,
                 quantization_config: Optional[QuantizationConfig] = None):
        """
        Initialize converter.

        Args:
            options: Conversion toggles
            quantization_config: Grid and lane settings
        """
        self.options = options or ConversionOptions()
        self.quantizer = Quantizer(quantization_config or QuantizationConfig())

    def convert(self, document: ChartDocument,
                on_diagnostic: Optional[DiagnosticSink] = None) -> ConversionResult:
        """
        Convert a chart document.

        Args:
            document: Parsed chart document
            on_diagnostic: Receives human readable warnings; defaults to
                logging them

        Returns:
            ConversionResult with timing markers and notes

        Raises:
            ChartFormatError: If the chart has no timing points or a line
                cannot be parsed
        """
        result = ConversionResult()
        sink = on_diagnostic or _log_diagnostic

        def report(message: str) -> None:
            result.diagnostics.append(message)
            sink(message)

        timing_points = document.get_timing_points()
        if not timing_points:
            raise ChartFormatError("Chart has no timing points")
        reference = timing_points[0]

        offset_bpm, offset_error = self.quantizer.find_offset_bpm(reference.offset)
        result.offset_bpm = offset_bpm
        result.offset_error = offset_error
        report(f"Offset has an error of {json_number(offset_error)}ms")

        # the first marker must sit on beat 0
        result.notes.append(TimingMarker(offset_bpm, 0))
        offset_beat = self.quantizer.offset_beat(reference.offset, offset_bpm)
        bpm = round_half_up(60000.0 / reference.ms_per_beat)
        result.notes.append(TimingMarker(bpm, offset_beat))

        tracks = SustainTracks()

        def snap(time: float) -> float:
            return self.quantizer.snap_beat(time, reference.offset, reference.ms_per_beat, offset_beat)

        hit_objects = sorted(document.get_hit_objects(), key=lambda o: o.time)
        for obj in hit_objects:
            lane = self.quantizer.lane_for(obj.x)
            beat = snap(obj.time)
            flick = self.options.flick_finishes and bool(obj.hit_sound & FINISH_HITSOUND)

            if self.options.convert_holds and obj.kind is HitObjectKind.HOLD:
                end_beat = snap(obj.end_time)
                pos = tracks.allocate(beat, end_beat)
                if pos is None:
                    result.notes.append(SingleNote(lane, beat))
                    report(f"Too many holds at {obj.time}")
                else:
                    result.notes.append(SlideNote(pos, lane, beat, start=True))
                    result.notes.append(SlideNote(pos, lane, end_beat, end=True))
            else:
                result.notes.append(SingleNote(lane, beat, flick=flick))

        logger.info(
            f"Converted {len(hit_objects)} hit objects into {len(result.notes)} records "
            f"(offset BPM {offset_bpm}, BPM {bpm})"
        )
        return result


def convert_chart(text: Union[str, bytes],
                  on_diagnostic: Optional[DiagnosticSink] = None,
                  options: Optional[ConversionOptions] = None) -> str:
    """
    Convert raw chart text straight to the JSON output.

    Args:
        text: Chart file contents
        on_diagnostic: Receives human readable warnings
        options: Conversion toggles

    Returns:
        JSON array text
    """
    document = ChartDocument.parse(text)
    return ChartConverter(options).convert(document, on_diagnostic).to_json()


class JSONChartWriter:
    """Writes conversion results to JSON files."""

    def write(self, result: ConversionResult, output_path: Union[str, Path]) -> None:
        """
        Export a conversion result to a JSON file.

        Args:
            result: Conversion result
            output_path: Output JSON file path
        """
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        with open(output_path, 'w', encoding='utf-8') as f:
            f.write(result.to_json())

    @staticmethod
    def load(file_path: Union[str, Path]) -> List[Dict[str, Any]]:
        """
        Load a converted chart.

        Args:
            file_path: Path to JSON file

        Returns:
            List of chart records
        """
        with open(file_path, 'r', encoding='utf-8') as f:
            return json.load(f)
