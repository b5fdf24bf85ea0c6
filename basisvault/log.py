import logging
import sys

_root_logger = logging.getLogger()

_FORMAT = "%(asctime)s.%(msecs)03d [%(levelname)s] %(name)s.%(funcName)s:%(lineno)d %(message)s"


def setup_logging_to_console(level=logging.INFO, *, logger: logging.Logger = _root_logger) -> None:
    logger.setLevel(level)
    if not sys.stdout.isatty():
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        logger.addHandler(handler)
        return

    from rich.logging import RichHandler

    logger.addHandler(RichHandler(rich_tracebacks=True, level=level, show_time=True))
