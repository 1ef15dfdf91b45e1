# Entry point: configure logging, migrate, serve the admin app.
from __future__ import annotations

from linkadmin.admin.web import create_app
from linkadmin.config import Settings
from linkadmin.db.migrate import upgrade_to_head
from linkadmin.logging_utils import setup_logging

HOST = "127.0.0.1"
PORT = 5000


def main() -> None:
    settings = Settings.from_env()
    logger = setup_logging(
        enabled=settings.log_enabled,
        debug=settings.debug,
        sql_debug=settings.sql_debug,
        file_path=settings.log_file,
    )

    upgrade_to_head()
    logger.info("schema at head")

    app = create_app(settings)
    app.run(host=HOST, port=PORT, debug=settings.debug)


if __name__ == "__main__":  # pragma: no cover
    main()
