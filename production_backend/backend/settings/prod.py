# backend/settings/prod.py
"""
PATH: backend/settings/prod.py

PRODUCTION SETTINGS

Fail-closed startup checks:
- DEBUG forced off, SECRET_KEY and ALLOWED_HOSTS required
- Postgres only: stock, order and batch locking relies on
  SELECT ... FOR UPDATE, which SQLite silently ignores
- Batch engine knobs validated (positive default capacity, named overflow sink)
- CORS/CSRF origins explicit and https only

Static files are served by WhiteNoise behind a TLS-terminating proxy.
"""

from __future__ import annotations

from django.core.exceptions import ImproperlyConfigured

from .base import *  # noqa: F403
from .base import (  # explicit for Ruff (F405)
    BASE_DIR,
    DEFAULT_BATCH_CAPACITY,
    LOGGING,
    MIDDLEWARE,
    OVERFLOW_DESTINATION,
    env,
)

DEBUG = False

# ----------------------------
# SECRET KEY / HOSTS
# ----------------------------
SECRET_KEY = (env("SECRET_KEY", default="") or "").strip()
if not SECRET_KEY or SECRET_KEY == "dev-insecure-change-me":
    raise ImproperlyConfigured("SECRET_KEY must be set to a strong value in production.")

ALLOWED_HOSTS = env.list("ALLOWED_HOSTS", default=[])
if not ALLOWED_HOSTS:
    raise ImproperlyConfigured("ALLOWED_HOSTS must be set in production.")

# ----------------------------
# DATABASE (POSTGRES ONLY)
# ----------------------------
_database_url = (env("DATABASE_URL", default="") or "").strip()
if not _database_url or _database_url.startswith("sqlite"):
    raise ImproperlyConfigured(
        "DATABASE_URL must point at Postgres in production; "
        "row locks are required by the allocation engine."
    )

DATABASES = {"default": env.db("DATABASE_URL")}
DATABASES["default"]["CONN_MAX_AGE"] = env.int("DB_CONN_MAX_AGE", default=60)

# ----------------------------
# BATCH ENGINE
# ----------------------------
if DEFAULT_BATCH_CAPACITY <= 0:
    raise ImproperlyConfigured("DEFAULT_BATCH_CAPACITY must be greater than zero.")
if not OVERFLOW_DESTINATION:
    raise ImproperlyConfigured("OVERFLOW_DESTINATION must not be empty.")

# ----------------------------
# STATIC FILES (WhiteNoise)
# ----------------------------
STATIC_ROOT = env("STATIC_ROOT", default=str(BASE_DIR / "staticfiles"))

MIDDLEWARE.insert(1, "whitenoise.middleware.WhiteNoiseMiddleware")
STORAGES = {
    "default": {"BACKEND": "django.core.files.storage.FileSystemStorage"},
    "staticfiles": {
        "BACKEND": "whitenoise.storage.CompressedManifestStaticFilesStorage"
    },
}

# ----------------------------
# PROXY / TRANSPORT SECURITY
# ----------------------------
SECURE_PROXY_SSL_HEADER = ("HTTP_X_FORWARDED_PROTO", "https")
SECURE_SSL_REDIRECT = env.bool("SECURE_SSL_REDIRECT", default=True)

SECURE_HSTS_SECONDS = env.int("SECURE_HSTS_SECONDS", default=3600)
SECURE_HSTS_INCLUDE_SUBDOMAINS = env.bool("SECURE_HSTS_INCLUDE_SUBDOMAINS", default=True)
SECURE_HSTS_PRELOAD = env.bool("SECURE_HSTS_PRELOAD", default=False)

SESSION_COOKIE_SECURE = True
CSRF_COOKIE_SECURE = True
SESSION_COOKIE_HTTPONLY = True
CSRF_COOKIE_HTTPONLY = True
SESSION_COOKIE_SAMESITE = "Lax"
CSRF_COOKIE_SAMESITE = "Lax"

SECURE_CONTENT_TYPE_NOSNIFF = True
SECURE_REFERRER_POLICY = "same-origin"
SECURE_CROSS_ORIGIN_OPENER_POLICY = "same-origin"
X_FRAME_OPTIONS = "DENY"

# ----------------------------
# CORS / CSRF (explicit + https only)
# ----------------------------
CORS_ALLOWED_ORIGINS = env.list("CORS_ALLOWED_ORIGINS", default=[])
CSRF_TRUSTED_ORIGINS = env.list("CSRF_TRUSTED_ORIGINS", default=[])
CORS_ALLOW_CREDENTIALS = False

for _name, _origins in (
    ("CORS_ALLOWED_ORIGINS", CORS_ALLOWED_ORIGINS),
    ("CSRF_TRUSTED_ORIGINS", CSRF_TRUSTED_ORIGINS),
):
    if not _origins:
        raise ImproperlyConfigured(f"{_name} must be set in production.")
    if any("localhost" in o or "127.0.0.1" in o for o in _origins):
        raise ImproperlyConfigured(f"Remove localhost from {_name} in production.")
    if any(o.startswith("http://") for o in _origins):
        raise ImproperlyConfigured(f"{_name} must be https:// in production.")

# ----------------------------
# LOGGING
# ----------------------------
# worker pid: allocation runs from several workers interleave in one stream
LOGGING["formatters"]["simple"]["format"] = (
    "%(asctime)s %(levelname)s [%(process)d] %(name)s: %(message)s"
)
