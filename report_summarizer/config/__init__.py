from .settings import Settings, get_settings
from .logger_config import setup_logging

__all__ = ["Settings", "get_settings", "setup_logging"]
