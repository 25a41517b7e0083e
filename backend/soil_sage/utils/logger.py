import logging
import sys
from pathlib import Path

from soil_sage.core.config import settings


def setup_logging(log_dir: str = "logs") -> logging.Logger:
    """Setup application logging"""

    # Create logger
    logger = logging.getLogger("soil_sage")
    logger.setLevel(getattr(logging, settings.log_level.upper(), logging.INFO))

    # Handlers are attached once per process
    if logger.handlers:
        return logger

    console_handler = logging.StreamHandler(sys.stdout)
    Path(log_dir).mkdir(parents=True, exist_ok=True)
    file_handler = logging.FileHandler(Path(log_dir) / "application.log")

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    console_handler.setFormatter(formatter)
    file_handler.setFormatter(formatter)

    logger.addHandler(console_handler)
    logger.addHandler(file_handler)
    logger.propagate = False

    return logger
