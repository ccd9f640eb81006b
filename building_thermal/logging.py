"""Loggers for the modules of the package."""
import logging
from pathlib import Path


class ModuleLogger:
    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR

    FORMATTER = logging.Formatter('[%(process)s | %(name)s | %(levelname)s] %(message)s')

    @classmethod
    def get_logger(
        cls,
        logger_name: str,
        file_path: Path | str | None = None,
        log_level: int = logging.DEBUG
    ) -> logging.Logger:
        """Returns the logger named `logger_name`.

        The first time a name is asked for, the logger gets a console handler
        and, if `file_path` is given, a file handler to which records are
        appended. Later calls return the same logger unchanged. Modules
        usually narrow the level of their logger afterwards with
        `logger.setLevel(...)`.
        """
        logger = logging.getLogger(logger_name)
        if logger.handlers:
            return logger
        handlers: list[logging.Handler] = [logging.StreamHandler()]
        if file_path is not None:
            handlers.append(logging.FileHandler(file_path, mode='a', encoding='utf-8'))
        for handler in handlers:
            handler.setFormatter(cls.FORMATTER)
            handler.setLevel(log_level)
            logger.addHandler(handler)
        logger.setLevel(log_level)
        return logger
