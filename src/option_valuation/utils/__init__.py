from .logging_config import LIBRARY_LOGGER, coerce_level, setup_logging

__all__ = ["LIBRARY_LOGGER", "coerce_level", "setup_logging"]
