# coding=utf-8
import logging
import os
import sys
from logging.handlers import RotatingFileHandler

FORMAT = '%(asctime)s %(levelname)s [%(process)d] %(filename)s %(message)s '

# handlers added by init_logger, replaced on the next call
_handlers = []


def init_logger(level=logging.INFO, log_filename=None, logger=None):
    """Attach the stderr handler, and a rotating file handler when log_filename is set"""
    if logger is None:
        logger = logging.getLogger('py_mysql_handshake')
    fmt = logging.Formatter(FORMAT)

    while _handlers:
        handler = _handlers.pop()
        logger.removeHandler(handler)
        handler.close()

    if log_filename:
        log_dir = os.path.dirname(os.path.abspath(log_filename))
        if not os.path.isdir(log_dir):
            os.makedirs(log_dir)

        # 单文件最大10M
        file_handler = RotatingFileHandler(log_filename, mode='a', maxBytes=10240000, backupCount=100,
                                           encoding="utf8")
        _handlers.append(file_handler)

    _handlers.append(logging.StreamHandler(sys.stderr))
    for handler in _handlers:
        handler.setFormatter(fmt)
        logger.addHandler(handler)
    logger.setLevel(level)

    return logger
