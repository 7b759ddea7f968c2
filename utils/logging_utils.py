import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

import config

_LOGGER_NAME = "pdv_hotel"
_LOG_FILE = Path(config.LOG_FILE)


def _configure_logger() -> logging.Logger:
    logger = logging.getLogger(_LOGGER_NAME)
    if logger.handlers:
        return logger

    logger.setLevel(getattr(logging, config.LOG_LEVEL.upper(), logging.INFO))
    logger.propagate = False

    try:
        handler = RotatingFileHandler(_LOG_FILE, maxBytes=1_000_000, backupCount=3, encoding="utf-8")
    except OSError:
        handler = logging.StreamHandler()

    formatter = logging.Formatter("%(asctime)s | %(levelname)s | %(message)s")
    handler.setFormatter(formatter)
    logger.addHandler(handler)
    return logger


_logger = _configure_logger()


def log_event(area: str, usuario, accao: str, detalhe: str = "") -> None:
    area_label = area.upper()
    message = f"{area_label} | Usuario: {usuario if usuario is not None else 'sistema'} | Acao: {accao}"
    if detalhe:
        message += f" | Detalhe: {detalhe}"
    _logger.info(message)


def log_warning(area: str, mensagem: str) -> None:
    _logger.warning(f"{area.upper()} | {mensagem}")


def log_exception(area: str, mensagem: str) -> None:
    _logger.exception(f"{area.upper()} | {mensagem}")
