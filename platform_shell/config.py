"""
Centralized Configuration - Single source of truth for all settings.

All environment variables are read here, validated, and exposed as module-level
constants. Other modules import from here instead of reading os.environ directly.

Settings that integrations toggle at runtime (data store, Sales Engine backend,
basic auth) are also exposed as functions that re-read the environment on every
call, so a deployment can flip them without a restart and tests can patch them.

Usage:
    from platform_shell.config import LOG_LEVEL, is_database_configured
"""

import os
import sys
from typing import Optional, Tuple

# ─── DATA STORE ──────────────────────────────────────────────

DB_POOL_MAX = int(os.environ.get("DB_POOL_MAX", "5"))
DB_CONNECT_TIMEOUT = float(os.environ.get("DB_CONNECT_TIMEOUT_SECONDS", "10"))
DB_IDLE_TIMEOUT = float(os.environ.get("DB_IDLE_TIMEOUT_SECONDS", "30"))

# ─── SALES ENGINE BACKEND ────────────────────────────────────

SALES_ENGINE_TIMEOUT = float(os.environ.get("SALES_ENGINE_TIMEOUT_SECONDS", "10"))

# ─── API ─────────────────────────────────────────────────────

API_HOST = os.environ.get("API_HOST", "0.0.0.0")
API_PORT = int(os.environ.get("API_PORT", "8000"))
CORS_ORIGINS = os.environ.get("SHELL_CORS_ORIGINS", "http://localhost:3000,http://localhost:8000").split(",")

# ─── LOGGING ─────────────────────────────────────────────────

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
LOG_FORMAT = os.environ.get("LOG_FORMAT", "text")  # "text" or "json"
LOG_FILE = os.environ.get("LOG_FILE", "")  # empty = stdout only

# ─── VALIDATION ──────────────────────────────────────────────

_VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
_VALID_LOG_FORMATS = {"text", "json"}

_errors = []

if LOG_LEVEL not in _VALID_LOG_LEVELS:
    _errors.append(f"LOG_LEVEL must be one of {_VALID_LOG_LEVELS}, got '{LOG_LEVEL}'")

if LOG_FORMAT not in _VALID_LOG_FORMATS:
    _errors.append(f"LOG_FORMAT must be one of {_VALID_LOG_FORMATS}, got '{LOG_FORMAT}'")

if DB_POOL_MAX < 1:
    _errors.append(f"DB_POOL_MAX must be positive, got {DB_POOL_MAX}")

if DB_CONNECT_TIMEOUT <= 0:
    _errors.append(f"DB_CONNECT_TIMEOUT_SECONDS must be positive, got {DB_CONNECT_TIMEOUT}")

if SALES_ENGINE_TIMEOUT <= 0:
    _errors.append(f"SALES_ENGINE_TIMEOUT_SECONDS must be positive, got {SALES_ENGINE_TIMEOUT}")

if _errors:
    for e in _errors:
        print(f"[config] ERROR: {e}", file=sys.stderr)
    # Don't crash during import; the dashboard should still come up


def validate(strict: bool = False) -> list:
    """Validate all configuration settings.

    Args:
        strict: If True, raise ValueError on any errors.

    Returns:
        List of error messages (empty if all valid).
    """
    if strict and _errors:
        raise ValueError(f"Configuration errors: {'; '.join(_errors)}")
    return list(_errors)


# ─── RUNTIME LOOKUPS ─────────────────────────────────────────

def database_path() -> Optional[str]:
    """Path of the contacts database, or None when no data store is configured."""
    return os.environ.get("SHELL_DB_PATH") or os.environ.get("DATABASE_PATH") or None


def is_database_configured() -> bool:
    return bool(database_path())


def sales_engine_base_url() -> Optional[str]:
    """Base URL of the Sales Engine API, without a trailing slash."""
    url = (os.environ.get("SALES_ENGINE_API_BASE_URL")
           or os.environ.get("NEXT_PUBLIC_SALES_ENGINE_API_BASE_URL"))
    return url.rstrip("/") if url else None


def basic_auth_credentials() -> Optional[Tuple[str, str]]:
    """(username, password) when both are set, else None (auth gate fails open)."""
    username = os.environ.get("BASIC_AUTH_USERNAME")
    password = os.environ.get("BASIC_AUTH_PASSWORD")
    if username and password:
        return username, password
    return None


def print_config():
    """Print current configuration (safe - no secrets)."""
    print("=" * 50)
    print("Platform Shell Configuration")
    print("=" * 50)
    print(f"  DB_PATH:              {database_path() or '(not configured)'}")
    print(f"  DB_POOL_MAX:          {DB_POOL_MAX}")
    print(f"  DB_CONNECT_TIMEOUT:   {DB_CONNECT_TIMEOUT}s")
    print(f"  DB_IDLE_TIMEOUT:      {DB_IDLE_TIMEOUT}s")
    print(f"  SALES_ENGINE_URL:     {sales_engine_base_url() or '(mock data)'}")
    print(f"  SALES_ENGINE_TIMEOUT: {SALES_ENGINE_TIMEOUT}s")
    print(f"  BASIC_AUTH:           {'enabled' if basic_auth_credentials() else 'disabled'}")
    print(f"  API_HOST:             {API_HOST}")
    print(f"  API_PORT:             {API_PORT}")
    print(f"  LOG_LEVEL:            {LOG_LEVEL}")
    print(f"  LOG_FORMAT:           {LOG_FORMAT}")
    print("=" * 50)
