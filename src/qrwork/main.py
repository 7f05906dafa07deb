from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from .attendance.controller import register as register_attendance
from .auth.controller import register as register_auth
from .auth.tokens import init_jwt
from .common.http import register_error_handlers
from .companies.controller import register as register_companies
from .config import get_settings_module
from .container import Container, build_container
from .contracts.controller import register as register_contracts
from .database.bootstrap import apply_schema, list_tables
from .employees.controller import register as register_employees
from .leave.controller import register as register_leave
from .qrcodes.controller import register as register_qrcodes
from .statistics.controller import register as register_statistics
from .superadmin.controller import register as register_superadmin

logger = logging.getLogger(__name__)


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["BASE_URL"] = getattr(settings, "BASE_URL")
    db_config = getattr(settings, "DB_CONFIG")

    init_jwt(
        app,
        secret_key=getattr(settings, "JWT_SECRET_KEY"),
        cookie_secure=bool(getattr(settings, "COOKIE_SECURE", False)),
    )
    register_error_handlers(app)

    if container is None:
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config)
            logger.info("schema ready (tables=%d)", len(list_tables(db_config)))

        container = build_container(
            db_config=db_config,
            base_url=app.config["BASE_URL"],
            super_admin_email=getattr(settings, "SUPER_ADMIN_EMAIL", None),
            super_admin_password=getattr(settings, "SUPER_ADMIN_PASSWORD", None),
            super_admin_name=getattr(settings, "SUPER_ADMIN_NAME", "Super Admin"),
        )

    register_companies(app, container)
    register_auth(app, container)
    register_employees(app, container)
    register_qrcodes(app, container)
    register_attendance(app, container)
    register_leave(app, container)
    register_contracts(app, container)
    register_statistics(app, container)
    register_superadmin(app, container)

    return app
