"""Loading of Python configuration files."""

import importlib.util
import logging
import os
import sys

from ..exceptions import AnalyzerError, InvalidConfigError, InvalidPathError
from .configuration import Configuration

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILENAME = "composer-deps.py"


def load_configuration(config_path: str) -> Configuration:
    """Execute a Python config file and return its ``config`` object.

    The file is a regular Python module; it must define a module-level
    ``config`` holding a Configuration, for example:

        from composer_deps.config import Configuration

        config = Configuration().add_path_to_scan("bin", is_dev=False)

    Args:
        config_path: Path to the config file.

    Returns:
        The Configuration defined by the file.

    Raises:
        InvalidPathError: If the file does not exist.
        InvalidConfigError: If executing the file fails or it defines no
            Configuration named ``config``.
    """
    if not os.path.isfile(config_path):
        raise InvalidPathError(f"Invalid config path given, {config_path} is not a file.")

    module_name = f"composer_deps_config_{os.stat(config_path).st_ino}"
    spec = importlib.util.spec_from_file_location(module_name, config_path)
    if spec is None or spec.loader is None:
        raise InvalidConfigError(f"Unable to load {config_path} as a Python module")

    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except AnalyzerError:
        raise
    except Exception as e:
        raise InvalidConfigError(f"Error while loading configuration from '{config_path}': {e}") from e
    finally:
        sys.modules.pop(module_name, None)

    config = getattr(module, "config", None)
    if not isinstance(config, Configuration):
        raise InvalidConfigError(
            f"Invalid config file, it must define a 'config' variable "
            f"holding an instance of {Configuration.__module__}.Configuration"
        )

    logger.debug("Using config %s", config_path)
    return config
