# backend/settings/dev.py
"""
PATH: backend/settings/dev.py

LOCAL DEVELOPMENT SETTINGS

- SQLite by default (row locks are no-ops there; use a Postgres DATABASE_URL
  to exercise concurrent allocation runs locally)
- Engine loggers at DEBUG unless LOG_LEVEL says otherwise
"""

from __future__ import annotations

from .base import *  # noqa: F403
from .base import LOGGING, TESTING, env

DEBUG = True

ALLOWED_HOSTS = env.list("ALLOWED_HOSTS", default=["localhost", "127.0.0.1", "testserver"])

CORS_ALLOWED_ORIGINS = env.list("CORS_ALLOWED_ORIGINS", default=["http://localhost:5173"])
CSRF_TRUSTED_ORIGINS = env.list("CSRF_TRUSTED_ORIGINS", default=["http://localhost:5173"])
CORS_ALLOW_CREDENTIALS = True

if not TESTING and not env.str("LOG_LEVEL", default=""):
    for _cfg in LOGGING["loggers"].values():
        _cfg["level"] = "DEBUG"
