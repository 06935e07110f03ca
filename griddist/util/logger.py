import logging
import os
from typing import Optional

_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def log_setup(name: str, level, file: Optional[str] = None) -> logging.Logger:
    """
    Returns the logger `name` with the given level. With `file`, records are
    appended to it, otherwise they are only passed on to the root logger.
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)
    if file is not None:
        path = os.path.abspath(file)
        if not any(isinstance(h, logging.FileHandler) and h.baseFilename == path
                   for h in logger.handlers):
            fhandler = logging.FileHandler(filename=file, mode='a')
            fhandler.setFormatter(logging.Formatter(_FORMAT))
            logger.addHandler(fhandler)
    elif not logger.handlers:
        logger.addHandler(logging.NullHandler())
    return logger
