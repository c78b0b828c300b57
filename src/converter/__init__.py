"""
Converter module for osu2chart.

Converts chart documents into lane/beat JSON charts with A/B slide tracks.
"""

from .note import TimingMarker, SingleNote, SlideNote, SlidePos
from .quantizer import QuantizationConfig, Quantizer, round_half_up
from .converter import (
    ConversionOptions,
    ConversionResult,
    SustainTracks,
    ChartConverter,
    JSONChartWriter,
    convert_chart,
)

__all__ = [
    'TimingMarker',
    'SingleNote',
    'SlideNote',
    'SlidePos',
    'QuantizationConfig',
    'Quantizer',
    'round_half_up',
    'ConversionOptions',
    'ConversionResult',
    'SustainTracks',
    'ChartConverter',
    'JSONChartWriter',
    'convert_chart',
]
