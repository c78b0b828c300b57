"""
CLI tool for chart conversion.

Usage:
    # Convert a beatmap and print the JSON chart
    python -m src.converter.cli --input map.osu

    # Convert into a directory, tagging the difficulty name
    python -m src.converter.cli --input map.osu --output-dir charts --append-diff-name converted
"""

import logging
import sys
from pathlib import Path
from typing import List, Optional

from src.beatmap import ChartDocument, ChartFormatError
from src.pipeline.config_parser import parse_args_to_config
from .converter import ChartConverter, JSONChartWriter


logger = logging.getLogger("converter.cli")


def resolve_output_path(document: ChartDocument, args, output_dir: Optional[str]) -> Optional[Path]:
    """Pick the output file: explicit path, then output directory, else stdout."""
    if args.output:
        return Path(args.output)
    if output_dir is None:
        return None
    if args.append_diff_name:
        document.append_to_diff_name(args.append_diff_name)
    name = Path(document.filename or 'chart.osu').stem
    return Path(output_dir) / f"{name}.json"


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    args, config = parse_args_to_config(argv)

    logging.basicConfig(
        level=getattr(logging, config.output.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    try:
        document = ChartDocument.from_file(args.input)
    except OSError as e:
        logger.error(f"Could not read {args.input}: {e}")
        return 1

    converter = ChartConverter(config.conversion, config.quantization)
    try:
        result = converter.convert(document)
    except ChartFormatError as e:
        logger.error(f"Invalid chart {args.input}: {e}")
        return 1

    output_path = resolve_output_path(document, args, config.output.output_dir)
    if output_path is None:
        print(result.to_json())
    else:
        JSONChartWriter().write(result, output_path)
        logger.info(f"Wrote {len(result.notes)} records to {output_path}")

    return 0


if __name__ == '__main__':
    sys.exit(main())
