# Common utilities
from .config_loader import load_config, load_importer_settings
from .log_config import setup_logging
from .text_utils import absolute_url, clean_text
