"""Logging setup: loguru sinks plus forwarding of stdlib loggers into loguru."""

import logging
import sys
from pathlib import Path

from loguru import logger

from books_api.runtime.config.config_data import ConfigData, LoggingConfig
from books_api.runtime.context import get_config

PLAIN_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "[<cyan>{extra[request_id]}</cyan>] | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)

# Third-party loggers and the lowest level each one may emit
_LIBRARY_LEVELS = {
    "sqlalchemy.engine": logging.WARNING,
    "sqlalchemy.pool": logging.WARNING,
    "uvicorn": logging.INFO,
    "uvicorn.error": logging.INFO,
    "uvicorn.access": logging.CRITICAL,
}


class InterceptHandler(logging.Handler):
    """Forward standard ``logging`` records to loguru.

    uvicorn access lines and uvicorn's unhandled-error tracebacks are dropped:
    ``log_requests`` records both, tagged with the request id.
    """

    def emit(self, record: logging.LogRecord) -> None:
        if record.name == "uvicorn.access":
            return
        if record.name == "uvicorn.error" and record.levelno >= logging.ERROR:
            return

        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        logger.opt(depth=2, exception=record.exc_info).bind(
            logger_name=record.name
        ).log(level, record.getMessage())


def _add_sinks(cfg: LoggingConfig, verbose_tracebacks: bool) -> None:
    serialize = cfg.format == "json"
    # serialize=True writes one JSON object per record and ignores the format
    fmt = "{message}" if serialize else PLAIN_FORMAT

    logger.add(
        sys.stderr,
        level=cfg.level,
        format=fmt,
        serialize=serialize,
        colorize=not serialize,
        backtrace=verbose_tracebacks,
        diagnose=verbose_tracebacks,
    )

    if cfg.file:
        path = Path(cfg.file)
        path.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            str(path),
            level=cfg.level,
            format=fmt,
            serialize=serialize,
            rotation=f"{cfg.max_size_mb} MB",
            retention=cfg.backup_count,
            compression="zip",
            enqueue=True,
            backtrace=verbose_tracebacks,
            diagnose=verbose_tracebacks,
        )


def _route_stdlib_logging() -> None:
    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)

    # Loggers created before this point keep no handlers of their own
    for name in list(logging.root.manager.loggerDict):
        stdlog = logging.getLogger(name)
        stdlog.handlers = []
        stdlog.propagate = True

    for name, level in _LIBRARY_LEVELS.items():
        logging.getLogger(name).setLevel(level)


def configure_logging(config: ConfigData | None = None) -> None:
    """Install the sinks described by ``config.logging``.

    The ``logging.format`` setting applies to the console and the file alike.
    Tracebacks show local variables outside production only.
    """
    main_config = config or get_config()
    cfg = main_config.logging
    env = main_config.app.environment

    logger.remove()
    # Records logged outside a request still render {extra[request_id]}
    logger.configure(extra={"request_id": "-"})

    _add_sinks(cfg, verbose_tracebacks=env != "production")
    _route_stdlib_logging()

    logger.bind(
        app_level=cfg.level,
        app_format=cfg.format,
        app_file=cfg.file,
        environment=env,
    ).info("Logging configured")
