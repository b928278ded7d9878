import gzip
import logging
import logging.handlers
import os
import shutil
import sys
from gzip import GzipFile
from pathlib import Path

from .config import settings

logger = logging.getLogger("storagekit")
logger.setLevel(settings.logging.level)
formatter = logging.Formatter(
    "%(asctime)s %(levelname)s [%(module)s:%(funcName)s:%(lineno)d] %(message)s"
)


def rotator(source, dest):
    with open(source, "rb") as f_in:
        with gzip.open(dest + ".gz", "wb") as f_out:
            assert isinstance(f_out, GzipFile)
            shutil.copyfileobj(f_in, f_out)
    os.remove(source)


def add_file_handler(logs_dir: Path) -> logging.Handler:
    """Attach a midnight-rotating, gzip-compressed file handler to the logger."""
    logs_dir.mkdir(parents=True, exist_ok=True)
    handler = logging.handlers.TimedRotatingFileHandler(
        logs_dir / "storagekit.log", when="midnight"
    )
    handler.setFormatter(formatter)
    handler.rotator = rotator
    logger.addHandler(handler)
    return handler


def add_stream_handler(stream=None) -> logging.Handler:
    """Attach a stream handler (stderr by default) to the logger."""
    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(formatter)
    logger.addHandler(handler)
    return handler


# Records still propagate to the host application's handlers
logger.addHandler(logging.NullHandler())

if settings.logging.logs_dir is not None:
    log_file_handler = add_file_handler(Path(settings.logging.logs_dir))

if settings.logging.stderr:
    log_stream_handler = add_stream_handler()
