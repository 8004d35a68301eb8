# coding=utf-8
# Copyright 2024 XiaHan
#
# Use of this source code is governed by an MIT-style
# license that can be found in the LICENSE file or at
# https://opensource.org/licenses/MIT.

import logging
import logging.handlers
import os
from typing import Dict, Optional

LOG_DIR_ENV = "OLLAMA_ASYNC_LOG_DIR"
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_log_dir: Optional[str] = None
# logger name -> log file name, for every logger built with a file name
_log_files: Dict[str, str] = {}
_file_handlers: Dict[str, logging.handlers.TimedRotatingFileHandler] = {}


def get_log_dir() -> Optional[str]:
    return _log_dir or os.environ.get(LOG_DIR_ENV) or None


def set_log_dir(path: Optional[str]) -> None:
    """
    Sets the log directory and moves the file handlers of every logger built
    so far into it. ``None`` falls back to ``OLLAMA_ASYNC_LOG_DIR``, and
    without either the file handlers are removed.
    """
    global _log_dir
    _log_dir = path
    log_dir = get_log_dir()
    for logger_name, logger_filename in _log_files.items():
        if log_dir is None:
            _detach_file_handler(logger_name)
        else:
            _attach_file_handler(logging.getLogger(logger_name), logger_filename, log_dir)


def _detach_file_handler(logger_name: str) -> None:
    handler = _file_handlers.pop(logger_name, None)
    if handler is None:
        return
    logging.getLogger(logger_name).removeHandler(handler)
    handler.close()


def _attach_file_handler(logger: logging.Logger, logger_filename: str, log_dir: str) -> None:
    filename = os.path.abspath(os.path.join(log_dir, logger_filename))
    current = _file_handlers.get(logger.name)
    if current is not None:
        if current.baseFilename == filename:
            return
        _detach_file_handler(logger.name)

    os.makedirs(log_dir, exist_ok=True)
    handler = logging.handlers.TimedRotatingFileHandler(
        filename, when="D", utc=True, encoding="utf-8"
    )
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
    logger.addHandler(handler)
    _file_handlers[logger.name] = handler


def build_logger(
    logger_name: str, logger_filename: Optional[str] = None
) -> logging.Logger:
    """
    Returns the named logger, attaching a daily rotating file handler when a
    log directory is configured.

    Loggers are usually built at import time, so the file name is remembered
    and the handler is attached later if ``set_log_dir`` is called then.

    :param logger_name: The dotted logger name.
    :param logger_filename: File name inside the log directory.
    :return: The configured logger.
    """
    logger = logging.getLogger(logger_name)
    if logger.level == logging.NOTSET:
        logger.setLevel(logging.INFO)

    if logger_filename is None:
        return logger
    _log_files[logger_name] = logger_filename

    log_dir = get_log_dir()
    if log_dir is not None:
        _attach_file_handler(logger, logger_filename, log_dir)
    return logger
