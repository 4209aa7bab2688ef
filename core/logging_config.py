
import logging
from logging import Logger

DEFAULT_FORMAT = "[%(asctime)s] %(levelname)s %(name)s: %(message)s"
DEFAULT_DATEFMT = "%H:%M:%S"
ENGINE_LOGGERS = ("rules.engine", "rules.ruleset", "rules.selection", "rules.loader")

def setup_logging(level: int = logging.INFO, *, engine_level: int | None = None) -> Logger:
    """Configure the root handler; ``engine_level`` overrides the rule engine loggers only."""
    logging.basicConfig(level=level, format=DEFAULT_FORMAT, datefmt=DEFAULT_DATEFMT)
    if engine_level is not None:
        for name in ENGINE_LOGGERS:
            logging.getLogger(name).setLevel(engine_level)
    logger = logging.getLogger("hes")
    logger.debug("Logging initialized.")
    return logger
