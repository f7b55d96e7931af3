"""
Structured JSON logging for the dashboard core.

Every module logs through the shared ``logger`` adapter. Keyword arguments
become fields of the JSON line:

    logger.info("Fetched source", source="/light/leads/", record_count=12)
"""

import inspect
import logging
import os

from pythonjsonlogger.json import JsonFormatter

LOGGER_NAME = "rooflink_dashboard"
LOG_FORMAT = "%(asctime)s %(levelname)s %(message)s"

# Arguments the stdlib logger consumes itself; everything else is context
_LOGGING_KWARGS = ("exc_info", "stack_info", "stacklevel")


def _level_from_env() -> int:
    level_name = os.getenv("LOG_LEVEL", "INFO").upper()
    return logging.getLevelNamesMapping().get(level_name, logging.INFO)


def _build_handler() -> logging.Handler:
    handler = logging.StreamHandler()
    handler.setFormatter(
        JsonFormatter(
            LOG_FORMAT,
            rename_fields={"asctime": "@timestamp", "levelname": "log_level"},
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    return handler


class Logger(logging.LoggerAdapter):
    """Process-wide adapter that turns keyword arguments into JSON fields.

    ``error`` and ``exception`` also record the caller's ``file:line``.
    """

    _instance = None

    def __new__(cls) -> "Logger":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            base = logging.getLogger(LOGGER_NAME)
            base.setLevel(_level_from_env())
            if not base.handlers:
                base.addHandler(_build_handler())
            logging.LoggerAdapter.__init__(cls._instance, base)
        return cls._instance

    def __init__(self) -> None:
        # State is set up once in __new__
        pass

    @staticmethod
    def _call_site(depth: int = 2) -> str:
        frame = inspect.currentframe()
        for _ in range(depth):
            if frame is None:
                return "unknown:0"
            frame = frame.f_back
        if frame is None:
            return "unknown:0"
        return f"{frame.f_code.co_filename}:{frame.f_lineno}"

    def error(self, msg: str, *args, **kwargs) -> None:
        kwargs["file"] = self._call_site()
        self.log(logging.ERROR, msg, *args, **kwargs)

    def exception(self, msg: str, *args, exc_info: bool = True, **kwargs) -> None:
        kwargs["file"] = self._call_site()
        self.log(logging.ERROR, msg, *args, exc_info=exc_info, **kwargs)

    def process(self, msg: str, kwargs: dict) -> tuple[str, dict]:
        logging_kwargs = {
            key: kwargs.pop(key) for key in _LOGGING_KWARGS if kwargs.get(key) is not None
        }
        for key in _LOGGING_KWARGS:
            kwargs.pop(key, None)
        if kwargs:
            logging_kwargs["extra"] = kwargs
        return msg, logging_kwargs


logger = Logger()
