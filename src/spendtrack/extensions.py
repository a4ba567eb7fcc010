"""Database wiring for the Flask application."""

from __future__ import annotations

import atexit

from flask import Flask, current_app
from sqlalchemy.engine import Engine

from .config import BaseConfig
from .infra.database import SessionFactory, bootstrap_database
from .infra.repositories import SQLModelCategoryRepository, SQLModelExpenseRepository
from .logging_config import get_logger

logger = get_logger(__name__)

_EXTENSION_KEY = "spendtrack.db"


def init_db(app: Flask) -> None:
    """Create the engine for this app, bootstrap the schema and register teardown."""

    config: BaseConfig = app.config["SPENDTRACK_CONFIG"]
    engine, session_factory = bootstrap_database(config)
    app.extensions[_EXTENSION_KEY] = {"engine": engine, "session_factory": session_factory}

    # The engine lives as long as the process; release pooled connections on exit.
    atexit.register(engine.dispose)
    logger.info("Database ready", extra={"url": engine.url.render_as_string(hide_password=True)})


def _state(app: Flask | None = None) -> dict:
    app = app or current_app
    state = app.extensions.get(_EXTENSION_KEY)
    if state is None:  # pragma: no cover - exercised only on misconfiguration
        raise RuntimeError("Database engine not initialized")
    return state


def get_engine(app: Flask | None = None) -> Engine:
    """Return the engine bound to the (current) application."""

    return _state(app)["engine"]


def get_session_factory(app: Flask | None = None) -> SessionFactory:
    """Return the session factory bound to the (current) application."""

    return _state(app)["session_factory"]


def category_repository() -> SQLModelCategoryRepository:
    return SQLModelCategoryRepository(get_session_factory())


def expense_repository() -> SQLModelExpenseRepository:
    return SQLModelExpenseRepository(get_session_factory())
