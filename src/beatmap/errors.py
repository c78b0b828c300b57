"""
Error types for beatmap parsing.
"""


class ChartFormatError(ValueError):
    """Raised when a field of a chart document cannot be parsed."""
    pass
