from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .container import Container, build_container
from .core.constants import DEFAULT_CACHE_MAX_SIZE, DEFAULT_CACHE_TTL_SECONDS
from .database.bootstrap import apply_schema, ensure_demo_users, list_tables
from .leaves.controller import register as register_leaves
from .users.controller import register as register_users

logger = logging.getLogger("hostel_pass")

SCHEMA_PATH = Path(__file__).resolve().parents[3] / "database" / "schema.sql"


def _configure_logging(settings, debug: bool) -> None:
    level = getattr(settings, "LOG_LEVEL", None) or ("DEBUG" if debug else "INFO")
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["SCAN_AUTO_APPROVE"] = bool(getattr(settings, "SCAN_AUTO_APPROVE", True))
    app.json.ensure_ascii = False

    _configure_logging(settings, app.config["DEBUG"])
    logger.info(
        "settings=%s db=%s@%s:%s/%s scan_auto_approve=%s",
        settings_module,
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
        app.config["SCAN_AUTO_APPROVE"],
    )

    if container is None:
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=SCHEMA_PATH)
            logger.info("schema ready (tables=%d)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            ensure_demo_users(db_config)
            logger.info("demo users ready")

        container = build_container(
            db_config=db_config,
            scan_auto_approve=app.config["SCAN_AUTO_APPROVE"],
            cache_ttl_seconds=float(getattr(settings, "REQUEST_CACHE_TTL_SECONDS", DEFAULT_CACHE_TTL_SECONDS)),
            cache_max_size=int(getattr(settings, "REQUEST_CACHE_MAX_SIZE", DEFAULT_CACHE_MAX_SIZE)),
        )

    register_users(app, container)
    register_leaves(app, container)

    return app
