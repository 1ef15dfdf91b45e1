import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
SQL_LOGGER = "sqlalchemy.engine"


def setup_logging(  # noqa: PLR0913
    *,
    enabled: bool = True,
    debug: bool = False,
    sql_debug: bool = False,
    logger_name: str = "linkadmin",
    file_path: str | None = "logs/admin.log",
    max_bytes: int = 500_000,
    backups: int = 3,
) -> logging.Logger:
    """
    Configure the admin logger.
    - enabled=False: NullHandler only, level WARNING (DEBUG when debug=True).
    - enabled=True: StreamHandler plus RotatingFileHandler when file_path is set.
    - sql_debug=True: SQLAlchemy statement logging goes to the same handlers.
    """
    logger = logging.getLogger(logger_name)

    # the app factory runs once per test app: never stack handlers
    logger.handlers.clear()
    sql_logger = logging.getLogger(SQL_LOGGER)
    sql_logger.handlers.clear()
    sql_logger.setLevel(logging.WARNING)

    if not enabled:
        logger.setLevel(logging.DEBUG if debug else logging.WARNING)
        logger.addHandler(logging.NullHandler())
        return logger

    logger.setLevel(logging.DEBUG if debug else logging.INFO)

    fmt = logging.Formatter(LOG_FORMAT)

    sh = logging.StreamHandler()
    sh.setFormatter(fmt)
    logger.addHandler(sh)

    if file_path:
        Path(file_path).parent.mkdir(parents=True, exist_ok=True)
        fh = RotatingFileHandler(file_path, maxBytes=max_bytes, backupCount=backups, encoding="utf-8")
        fh.setFormatter(fmt)
        logger.addHandler(fh)

    if sql_debug:
        sql_logger.setLevel(logging.INFO)
        sql_logger.propagate = False
        for h in logger.handlers:
            sql_logger.addHandler(h)
    else:
        sql_logger.propagate = True

    return logger
