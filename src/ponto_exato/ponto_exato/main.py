from __future__ import annotations

import atexit
import importlib
import logging
from datetime import timedelta
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .core.constants import DEFAULT_SESSION_DAYS
from .database.bootstrap import apply_schema, apply_seed_sql, ensure_demo_company, list_tables

from .container import Container, build_container
from .assistant.controller import register as register_assistant
from .companies.controller import register as register_companies
from .employees.controller import register as register_employees
from .navigation.controller import register as register_navigation
from .punch.controller import register as register_punch
from .records.controller import register as register_records
from .requests.controller import register as register_requests

logger = logging.getLogger(__name__)

REPO_ROOT = Path(__file__).resolve().parents[3]


def create_app(container: Optional[Container] = None) -> Flask:
    """Build the JSON API.

    Passing a ready ``container`` skips every database step (used by tests).
    """

    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    session_days = int(getattr(settings, "SESSION_DAYS", DEFAULT_SESSION_DAYS))
    app.config["PERMANENT_SESSION_LIFETIME"] = timedelta(days=session_days)

    logging.basicConfig(
        level=logging.DEBUG if app.config["DEBUG"] else logging.INFO,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

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
            apply_schema(db_config, schema_path=REPO_ROOT / "database" / "schema.sql")
            logger.info("schema ready (tables=%d)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            apply_seed_sql(db_config, seed_path=REPO_ROOT / "database" / "seed.sql")
            ensure_demo_company(db_config)
            logger.info("demo seed ready")

        container = build_container(
            db_config=db_config,
            gemini_api_key=getattr(settings, "GEMINI_API_KEY", None),
            gemini_model=getattr(settings, "GEMINI_MODEL", "gemini-3-pro-preview"),
            gemini_audit_model=getattr(settings, "GEMINI_AUDIT_MODEL", None),
            sync_poll_seconds=float(getattr(settings, "SYNC_POLL_SECONDS", 2.0)),
        )
        atexit.register(container.live_states.shutdown)

    app.extensions["ponto_exato"] = container

    register_employees(app, container)
    register_navigation(app, container)
    register_companies(app, container)
    register_records(app, container)
    register_punch(app, container)
    register_requests(app, container)
    register_assistant(app, container)

    return app
