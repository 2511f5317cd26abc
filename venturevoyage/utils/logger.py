import logging
import sys
from venturevoyage.utils.config import config

PACKAGE_LOGGER = "venturevoyage"

# Third-party libraries (requests, openai, httpx) only surface errors
logging.basicConfig(level=logging.ERROR, format=config.log_format, stream=sys.stdout)


def _configure_package_logger(name):
    package_logger = logging.getLogger(name)
    package_logger.setLevel(config.log_level)

    # Reconfiguring on re-import must not stack handlers
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(config.log_format))
    package_logger.addHandler(handler)
    package_logger.propagate = False
    return package_logger


_configure_package_logger(PACKAGE_LOGGER)

# Child of the package logger; every module logs through this one
logger = logging.getLogger(__name__)
