"""Run configuration: scan paths, exclusions and ignore rules."""

from .configuration import Configuration, PathToScan
from .ignore_list import IgnoreList, IgnoreRules
from .loader import DEFAULT_CONFIG_FILENAME, load_configuration

__all__ = [
    "Configuration",
    "DEFAULT_CONFIG_FILENAME",
    "IgnoreList",
    "IgnoreRules",
    "PathToScan",
    "load_configuration",
]
