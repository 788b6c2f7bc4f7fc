"""
Logger utility for the animals store
Shared "animals" logger used by the data layer, the demo steps and config loading.
"""

import logging
import sys
from typing import Any, Optional

from .structured_logging import is_structured_logging_configured


LOGGER_NAME = "animals"
FALLBACK_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class Logger:
    """Process-wide facade over the "animals" logger.

    The first instance makes sure records go somewhere: when
    utils.structured_logging.setup_logging() has not run, a console
    handler is installed on the root logger.
    """

    _instance: Optional["Logger"] = None
    _initialized: bool = False

    def __new__(cls) -> "Logger":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        if not self._initialized:
            self.setup_logging()
            Logger._initialized = True

    def setup_logging(self) -> None:
        if not is_structured_logging_configured(logging.getLogger()):
            # No-op when the root logger already has handlers
            logging.basicConfig(
                level=logging.INFO,
                format=FALLBACK_FORMAT,
                handlers=[logging.StreamHandler(sys.stdout)],
            )
        self.logger = logging.getLogger(LOGGER_NAME)

    def error(self, message: str, step: Optional[str] = None, **kwargs: Any) -> None:
        """Log an error, tagging the record with the demo step that failed."""
        if step is not None:
            kwargs["extra"] = {**kwargs.get("extra", {}), "step": step}
        self.logger.error(message, **kwargs)

    def debug(self, message: str, *args: Any, **kwargs: Any) -> None:
        self.logger.debug(message, *args, **kwargs)
