import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s"
MAX_LOG_BYTES = 5 * 1024 * 1024
LOG_BACKUPS = 5

_LOG_DIR = Path(os.getenv("DOCCHUNK_LOG_DIR", "logs"))
_LOG_FILE = os.getenv("DOCCHUNK_LOG_FILE")
_LEVEL_NAME = os.getenv("DOCCHUNK_LOG_LEVEL", "INFO")

# component -> (env override, default file under _LOG_DIR)
_COMPONENTS = {
    "extraction": ("DOCCHUNK_EXTRACTION_LOG_FILE", "extraction.log"),
    "chunking": ("DOCCHUNK_CHUNKING_LOG_FILE", "chunking.log"),
    "pipeline": ("DOCCHUNK_PIPELINE_LOG_FILE", "pipeline.log"),
}


def _default_level() -> int:
    level = logging.getLevelName(_LEVEL_NAME.upper())
    return level if isinstance(level, int) else logging.INFO


def _log_path(component: Optional[str] = None, log_file: Optional[str] = None) -> Path:
    if log_file:
        return Path(log_file)

    if component in _COMPONENTS:
        env_key, filename = _COMPONENTS[component]
        return Path(os.getenv(env_key) or _LOG_DIR / filename)

    return Path(_LOG_FILE) if _LOG_FILE else _LOG_DIR / "docchunk.log"


def _file_handler(log_path: Path, formatter: logging.Formatter) -> RotatingFileHandler:
    log_path.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        log_path,
        maxBytes=MAX_LOG_BYTES,
        backupCount=LOG_BACKUPS,
        encoding="utf-8"
    )
    handler.setFormatter(formatter)
    return handler


def get_logger(
    name: str,
    level: Optional[int] = None,
    log_file: Optional[str] = None
) -> logging.Logger:
    logger = logging.getLogger(name)

    if getattr(logger, "_docchunk_configured", False):
        if level is not None:
            logger.setLevel(level)
        return logger

    logger.setLevel(_default_level() if level is None else level)
    logger.propagate = False

    formatter = logging.Formatter(LOG_FORMAT)

    console = logging.StreamHandler()
    console.setFormatter(formatter)
    logger.addHandler(console)

    log_path = _log_path(log_file=log_file)
    try:
        logger.addHandler(_file_handler(log_path, formatter))
    except OSError:
        logger.exception("Failed to initialize file logging at %s", log_path)

    logger._docchunk_configured = True
    return logger


def get_component_logger(
    name: str,
    component: Optional[str] = None,
    level: Optional[int] = None,
    log_file: Optional[str] = None
) -> logging.Logger:
    """
    Logger for one pipeline component.

    component picks the log file: extraction, chunking or pipeline.
    DOCCHUNK_LOG_LEVEL sets the default level when none is passed.
    """
    return get_logger(name, level=level, log_file=str(_log_path(component, log_file)))
