from .logging_utils import get_clean_logger, setup_logging
from .config import get_config, reload_config

__all__ = [
  'get_clean_logger',
  'setup_logging',
  'get_config',
  'reload_config'
]
