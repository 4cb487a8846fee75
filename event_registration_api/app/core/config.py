"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  Defaults are provided for all fields so the
service starts without any configuration; in a real deployment at
least ``SECRET_KEY`` and the ``EMAIL_*`` variables should be set.
Tests construct their own ``Settings`` instance and pass it to
``create_app`` instead of touching the environment.
"""

import os
from dataclasses import dataclass


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes"}


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Virtual Event Management Platform API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    debug: bool = _env_flag("DEBUG")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    # Optional path of a log file written in addition to the console.
    log_file: str = os.getenv("LOG_FILE", "")

    # Bearer tokens are signed with ``secret_key`` and expire after
    # ``access_token_expire_minutes`` (24 hours by default).
    secret_key: str = os.getenv("SECRET_KEY", "default_jwt_secret")
    access_token_expire_minutes: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24)))
    algorithm: str = os.getenv("ALGORITHM", "HS256")
    password_min_length: int = int(os.getenv("PASSWORD_MIN_LENGTH", "6"))

    # SMTP settings for registration confirmations.  When ``email_host``
    # is empty, confirmations are logged and skipped.
    email_host: str = os.getenv("EMAIL_HOST", "")
    email_port: int = int(os.getenv("EMAIL_PORT", "587"))
    email_user: str = os.getenv("EMAIL_USER", "")
    email_password: str = os.getenv("EMAIL_PASS", "")
    email_use_tls: bool = _env_flag("EMAIL_USE_TLS", "true")
    email_from: str = os.getenv("EMAIL_FROM", "Event Management Platform <noreply@eventplatform.com>")
    email_timeout: float = float(os.getenv("EMAIL_TIMEOUT", "10"))

    # Size of the worker pool that sends notifications in the background.
    notification_workers: int = int(os.getenv("NOTIFICATION_WORKERS", "2"))

    # Bind address used by ``run.py``.
    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "3000"))


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Environment variables must
# be set before this module is imported.
settings = Settings()
