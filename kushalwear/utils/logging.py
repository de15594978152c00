"""
Konfiguracja logowania.

Kazdy modul bierze logger przez get_logger(__name__), wszystkie sa dziecmi
loggera "kushalwear" skonfigurowanego tutaj.
"""
import logging
import sys

from kushalwear.utils.settings import LOG_LEVEL

logger = logging.getLogger("kushalwear")
logger.setLevel(LOG_LEVEL)

if not logger.handlers:
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(LOG_LEVEL)

    formatter = logging.Formatter(
        fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    console_handler.setFormatter(formatter)

    logger.addHandler(console_handler)

logger.propagate = False


def get_logger(name: str = None) -> logging.Logger:
    """
    Zwraca logger dla modulu.

    Args:
        name: nazwa modulu, np. "kushalwear.services.cart_service"

    Returns:
        Logger bedacy dzieckiem loggera "kushalwear"
    """
    if not name:
        return logger
    if name == "kushalwear" or name.startswith("kushalwear."):
        return logging.getLogger(name)
    return logging.getLogger(f"kushalwear.{name}")
