from __future__ import annotations
import logging
from pathlib import Path
from typing import Optional

from .config import read_config_file

DEFAULT_LOG_LEVEL = logging.WARNING
LOG_FORMAT = '%(asctime)s %(levelname)s [%(name)s]: %(message)s'


def configure_logging(config_path: Optional[Path] = None, level: Optional[str] = None) -> logging.Logger:
    """Configure root logging for the object store tools.

    The level comes from `level` when given, else from `log_level` in the
    YAML config at `config_path`, else WARNING. Existing root handlers are
    replaced so repeated calls do not duplicate output. Returns a module
    logger for the caller.
    """
    # Minimal early config so other imports can emit without error
    logging.basicConfig(level=logging.NOTSET, format='%(asctime)s INFO %(message)s')
    log_level = DEFAULT_LOG_LEVEL

    name = level
    if name is None and config_path is not None and Path(config_path).exists():
        try:
            name = read_config_file(config_path).get('log_level')
        except (OSError, ValueError):
            # If config parse fails, fall back to default level
            logging.getLogger(__name__).debug('Could not read log level from %s', config_path, exc_info=True)
            name = None
    if isinstance(name, str):
        numeric = getattr(logging, name.upper(), None)
        if isinstance(numeric, int):
            log_level = numeric

    # Reconfigure root handlers to use the selected level and format
    for handler in logging.root.handlers[:]:
        logging.root.removeHandler(handler)
    logging.basicConfig(level=log_level, format=LOG_FORMAT)
    logger = logging.getLogger(__name__)
    logger.debug('Log level set to: %s', logging.getLevelName(log_level))
    return logger
