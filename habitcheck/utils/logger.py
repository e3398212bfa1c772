import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional


def setup_logger(log_file: str = "logs/habitcheck.log", max_bytes: int = 10_000_000, backup_count: int = 5,
                 formatter: Optional[logging.Formatter] = None) -> logging.Logger:
    Path(log_file).parent.mkdir(exist_ok=True, parents=True)
    logger = logging.getLogger()
    for existing in logger.handlers:
        if isinstance(existing, RotatingFileHandler) and existing.baseFilename == str(Path(log_file).resolve()):
            return logger
    handler = RotatingFileHandler(log_file, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8")
    handler.setFormatter(formatter or logging.Formatter('%(asctime)s [%(levelname)s] %(name)s: %(message)s'))
    logger.addHandler(handler)
    return logger
