import logging
from contextlib import contextmanager
from pathlib import Path

PACKAGE_LOGGER = "contig_screen"
LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


class _BelowWarning(logging.Filter):
    def filter(self, record):
        return record.levelno < logging.WARNING


@contextmanager
def log_to_files(output_dir, info_name="output.log", error_name="error.log"):
    """
    Send progress to `info_name` and warnings/errors to `error_name`, both
    appended inside output_dir, for the duration of the block.
    """
    output_dir = Path(output_dir)
    logger = logging.getLogger(PACKAGE_LOGGER)
    formatter = logging.Formatter(LOG_FORMAT)

    info_handler = logging.FileHandler(output_dir / info_name, mode="a")
    info_handler.setLevel(logging.INFO)
    info_handler.addFilter(_BelowWarning())
    info_handler.setFormatter(formatter)

    try:
        error_handler = logging.FileHandler(output_dir / error_name, mode="a")
    except OSError:
        info_handler.close()
        raise
    error_handler.setLevel(logging.WARNING)
    error_handler.setFormatter(formatter)

    previous_level = logger.level
    logger.setLevel(logging.INFO)
    logger.addHandler(info_handler)
    logger.addHandler(error_handler)
    try:
        yield logger
    finally:
        for handler in (info_handler, error_handler):
            logger.removeHandler(handler)
            handler.flush()
            handler.close()
        logger.setLevel(previous_level)
