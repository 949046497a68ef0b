# saivd/utils/logger.py

import logging
import sys

from saivd.core.config import LOG_LEVEL

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_logger(level: str = LOG_LEVEL) -> logging.Logger:
    """Configure the root logger once; repeated calls only adjust the level."""
    root = logging.getLogger()
    root.setLevel(level.upper())

    if not any(getattr(h, "_saivd", False) for h in root.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._saivd = True
        root.addHandler(handler)

    # boto and urllib3 are noisy at INFO
    logging.getLogger("botocore").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    return root
