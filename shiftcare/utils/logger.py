"""애플리케이션 로깅 설정.

Application logging setup. Configures the ``shiftcare`` logger hierarchy once
with a unified format; modules obtain loggers via ``logging.getLogger(__name__)``.
HTTP request logs go to Axiom through ``AxiomLoggingMiddleware``.
"""

import logging
import sys

DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

LOG_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def setup_logging(level: str = "INFO", name: str = "shiftcare") -> logging.Logger:
    """패키지 로거를 설정하고 반환합니다.

    Configure and return the package logger. Safe to call more than once:
    existing handlers are replaced rather than duplicated.

    Args:
        level: 로그 레벨 이름 (Log level name, unknown values fall back to INFO)
        name: 로거 이름 (Root logger name for the package)

    Returns:
        logging.Logger: 설정된 로거 (Configured logger)
    """
    log_level = LOG_LEVELS.get(level.upper(), logging.INFO)

    logger = logging.getLogger(name)
    logger.setLevel(log_level)
    logger.propagate = False
    logger.handlers.clear()

    # 컨테이너 환경에서 stderr로 출력 (stderr is captured by docker/uvicorn)
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(log_level)
    handler.setFormatter(logging.Formatter(DEFAULT_LOG_FORMAT, DEFAULT_DATE_FORMAT))
    logger.addHandler(handler)

    return logger
