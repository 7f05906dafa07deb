from __future__ import annotations

import importlib
import logging

from dotenv import load_dotenv

from qrwork.config import get_settings_module
from qrwork.database.bootstrap import apply_schema, list_tables

logger = logging.getLogger("qrwork.init_db")


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    logging.basicConfig(level=getattr(settings, "LOG_LEVEL", "INFO"), format="%(levelname)s %(message)s")
    db_config = dict(settings.DB_CONFIG)

    apply_schema(db_config)
    tables = list_tables(db_config)
    logger.info(
        "Applied schema.sql -> %s@%s:%s/%s (tables=%d)",
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
        len(tables),
    )


if __name__ == "__main__":
    main()
