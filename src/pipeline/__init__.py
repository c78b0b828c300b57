"""
Configuration package for osu2chart.

Loads the YAML defaults and merges command-line overrides into typed
configuration objects.
"""

from .config_parser import (
    AppConfig,
    OutputConfig,
    DEFAULT_CONFIG_PATH,
    create_arg_parser,
    args_to_config,
    parse_args_to_config,
    load_yaml_config,
    merge_configs,
    dict_to_config,
)

__all__ = [
    'AppConfig',
    'OutputConfig',
    'DEFAULT_CONFIG_PATH',
    'create_arg_parser',
    'args_to_config',
    'parse_args_to_config',
    'load_yaml_config',
    'merge_configs',
    'dict_to_config',
]
