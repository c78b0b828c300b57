"""Configuration parser for osu2chart.

Handles loading YAML config and merging with command-line arguments.
Command-line arguments have higher priority than config file values.
"""

import argparse
import yaml
from pathlib import Path
from typing import Dict, Any, List, Optional
from dataclasses import dataclass, field

from src.converter.converter import ConversionOptions
from src.converter.quantizer import QuantizationConfig


DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent / 'config.yaml'


@dataclass
class OutputConfig:
    """Output configuration."""
    output_dir: Optional[str] = None
    log_level: str = "INFO"


@dataclass
class AppConfig:
    """Complete converter configuration."""
    conversion: ConversionOptions = field(default_factory=ConversionOptions)
    quantization: QuantizationConfig = field(default_factory=QuantizationConfig)
    output: OutputConfig = field(default_factory=OutputConfig)


def load_yaml_config(config_path: str) -> Dict[str, Any]:
    """Load configuration from YAML file."""
    config_file = Path(config_path)
    if not config_file.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_file, 'r', encoding='utf-8') as f:
        config_dict = yaml.safe_load(f)

    return config_dict or {}


def merge_configs(base_config: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge override config into base config."""
    merged = base_config.copy()

    for key, value in overrides.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = merge_configs(merged[key], value)
        elif value is not None:  # Only override if value is not None
            merged[key] = value

    return merged


def dict_to_config(config_dict: Dict[str, Any]) -> AppConfig:
    """Convert dictionary to AppConfig dataclass."""
    return AppConfig(
        conversion=ConversionOptions(**(config_dict.get('conversion') or {})),
        quantization=QuantizationConfig(**(config_dict.get('quantization') or {})),
        output=OutputConfig(**(config_dict.get('output') or {})),
    )


def create_arg_parser() -> argparse.ArgumentParser:
    """Create argument parser with all converter options."""
    parser = argparse.ArgumentParser(
        description="Convert osu! beatmaps into lane/beat JSON charts",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Convert and print to stdout
  python -m src.converter.cli --input map.osu

  # Write to a file, keeping holds as single notes
  python -m src.converter.cli --input map.osu --output chart.json --no-holds
        """
    )

    parser.add_argument('--input', '-i', type=str, required=True,
                        help='Path to the .osu chart')
    parser.add_argument('--output', '-o', type=str,
                        help='Output JSON path (stdout if omitted)')
    parser.add_argument('--config', type=str,
                        help='Path to YAML configuration file')

    conversion_group = parser.add_argument_group('Conversion')
    conversion_group.add_argument('--no-holds', action='store_true',
                                  help='Convert hold notes to single notes')
    conversion_group.add_argument('--no-flicks', action='store_true',
                                  help='Ignore finish hit sounds')
    conversion_group.add_argument('--snap-divisor', type=int,
                                  help='Beat grid subdivisions')

    output_group = parser.add_argument_group('Output')
    output_group.add_argument('--output-dir', type=str,
                              help='Directory for converted charts')
    output_group.add_argument('--append-diff-name', type=str, metavar='POSTFIX',
                              help='Append POSTFIX to the difficulty name of the output file')
    output_group.add_argument('--log-level', type=str,
                              choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                              help='Logging level')

    return parser


def args_to_config(args: argparse.Namespace) -> AppConfig:
    """Merge parsed arguments with YAML config.

    Priority: CLI args > YAML config > defaults
    """
    if args.config:
        yaml_config = load_yaml_config(args.config)
    elif DEFAULT_CONFIG_PATH.exists():
        yaml_config = load_yaml_config(str(DEFAULT_CONFIG_PATH))
    else:
        yaml_config = {}

    overrides: Dict[str, Any] = {}

    if args.no_holds or args.no_flicks:
        overrides['conversion'] = {}
        if args.no_holds:
            overrides['conversion']['convert_holds'] = False
        if args.no_flicks:
            overrides['conversion']['flick_finishes'] = False

    if args.snap_divisor is not None:
        overrides['quantization'] = {'snap_divisor': args.snap_divisor}

    if args.output_dir is not None or args.log_level is not None:
        overrides['output'] = {
            'output_dir': args.output_dir,
            'log_level': args.log_level,
        }

    merged_config = merge_configs(yaml_config, overrides)
    return dict_to_config(merged_config)


def parse_args_to_config(argv: Optional[List[str]] = None):
    """Parse command-line arguments and build the configuration.

    Returns:
        (args, config) tuple
    """
    parser = create_arg_parser()
    args = parser.parse_args(argv)
    return args, args_to_config(args)
