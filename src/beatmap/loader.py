"""
File access for chart documents.

Reading the raw text is the only blocking step of a conversion; everything
after it works on in-memory lines.
"""

import asyncio
import logging
from pathlib import Path
from typing import Union


logger = logging.getLogger(__name__)


def read_chart_text(path: Union[str, Path]) -> str:
    """
    Read an entire chart file as UTF-8 text.

    Undecodable bytes are replaced with U+FFFD.

    Raises:
        OSError: If the file cannot be read
    """
    path = Path(path)
    logger.debug(f"Reading chart file: {path}")
    return path.read_bytes().decode('utf-8', errors='replace')


async def fetch_chart_text(path: Union[str, Path]) -> str:
    """Read a chart file on a worker thread."""
    return await asyncio.to_thread(read_chart_text, path)
