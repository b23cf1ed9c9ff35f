# File: paranoia_app/core/extensions.py
# Shared extension instances, bound to the app in bootstrap.register_extensions().

import sqlite3

from flask_apscheduler import APScheduler
from flask_login import LoginManager
from flask_sqlalchemy import SQLAlchemy
from flask_wtf import CSRFProtect
from sqlalchemy import event
from sqlalchemy.engine import Engine

db = SQLAlchemy()


@event.listens_for(Engine, "connect")
def _configure_sqlite(dbapi_connection, _connection_record):
    """Cron and web requests write to the same file; let them wait for each other."""
    if not isinstance(dbapi_connection, sqlite3.Connection):
        return
    cursor = dbapi_connection.cursor()
    try:
        cursor.execute("PRAGMA journal_mode=WAL;")
        cursor.execute("PRAGMA busy_timeout=30000;")
    finally:
        cursor.close()


login_manager = LoginManager()
login_manager.login_view = "auth.login"
login_manager.login_message = "Please log in to access this page."
login_manager.login_message_category = "info"

csrf_protect = CSRFProtect()

# Runs core.cron.run_cron on an interval
scheduler = APScheduler()

__all__ = ["db", "login_manager", "csrf_protect", "scheduler"]
