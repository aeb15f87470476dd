"""Sentry integration for persistence failure tracking."""

import os

import sentry_sdk

from utils.logger import Logger


def _get_sentry_dsn() -> str | None:
    """Get Sentry DSN from file or environment variable."""
    # Try file-based secret first (Docker/K8s)
    dsn_file = os.getenv("SENTRY_DSN_FILE")
    if dsn_file:
        try:
            with open(dsn_file, encoding="utf-8") as f:
                return f.read().strip()
        except OSError as e:
            Logger().warning(f"Could not read SENTRY_DSN_FILE: {e}")

    # Fallback to environment variable
    return os.getenv("SENTRY_DSN")


def init_error_reporting(dsn: str | None = None) -> bool:
    """Initialize Sentry when a DSN is available. Returns True if initialized."""
    sentry_dsn = dsn or _get_sentry_dsn()
    if not sentry_dsn:
        return False
    sentry_sdk.init(dsn=sentry_dsn, send_default_pii=False)
    Logger().info("Error reporting initialized")
    return True


def report_failure(error: BaseException, operation: str, entity: str) -> None:
    """Log a persistence failure and forward it to Sentry.

    Forwarding is a no-op unless ``init_error_reporting`` found a DSN.
    """
    Logger().error(f"{operation} failed for {entity}: {error}")
    with sentry_sdk.new_scope() as scope:
        scope.set_tag("operation", operation)
        scope.set_extra("entity", entity)
        sentry_sdk.capture_exception(error)
