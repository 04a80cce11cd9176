# logging_wrapper.py

import functools
import logging
import time

LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'


def setup_logging(verbose=False):
    logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO,
                        format=LOG_FORMAT)


def log_calls(func):
    """
    Декоратор для логирования начала и конца вызова функции,
    а также времени её выполнения.
    """
    logger = logging.getLogger(func.__module__)

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        name = func.__qualname__
        logger.info(">>> %s kwargs=%s", name, kwargs)
        t0 = time.perf_counter()
        result = func(*args, **kwargs)
        dt = time.perf_counter() - t0
        logger.info("<<< %s finished in %.2fs", name, dt)
        return result
    return wrapper
