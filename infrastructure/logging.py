import logging
import logging.handlers
import sys

import structlog

from infrastructure.config import Settings, settings

# Third-party loggers routed through the structlog formatter
_INTERCEPTED_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access", "fastapi")
_NOISY_LOGGERS = ("httpx", "httpcore", "fsspec")


def setup_logging(config: Settings = settings, *, log_to_file: bool = True) -> None:
    """Configure unified logging for structlog, uvicorn, and standard library."""
    common_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if config.app_env == "development":
        renderer = structlog.dev.ConsoleRenderer()
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[
            *common_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=common_processors,
        processor=renderer,
    )

    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.setFormatter(formatter)
    handlers: list[logging.Handler] = [stream_handler]

    if log_to_file:
        config.log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.TimedRotatingFileHandler(
            config.log_dir / f"{config.app_env}.log",
            when="midnight",
            interval=1,
            backupCount=7,
        )
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    root_logger = logging.getLogger()
    root_logger.handlers = list(handlers)
    root_logger.setLevel(config.log_level.upper())

    for logger_name in _INTERCEPTED_LOGGERS:
        logging_logger = logging.getLogger(logger_name)
        logging_logger.handlers = list(handlers)
        logging_logger.propagate = False

    # Request-level chatter from transfer libraries only at WARNING and up
    for logger_name in _NOISY_LOGGERS:
        logging.getLogger(logger_name).setLevel(logging.WARNING)
