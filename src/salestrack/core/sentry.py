"""Sentry error tracking configuration and initialization."""

import os

import sentry_sdk
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.logging import LoggingIntegration
from sentry_sdk.utils import BadDsn

from salestrack.core.logging import get_logger

logger = get_logger(__name__)

# Guard against multiple initializations
_sentry_initialized = False

# Keys whose values never leave the process
SENSITIVE_KEYS = ("sql", "file_content", "upload")


def init_sentry() -> None:
    """
    Initialize Sentry SDK for error tracking.

    Only initializes if SENTRY_DSN is set and looks like a URL, so local
    development and CI run without Sentry. Calling it twice is a no-op.

    Configuration:
    - Performance monitoring off
    - No PII, no SQL in payloads
    - Logging integration off; structlog already writes every event
    """
    global _sentry_initialized

    if _sentry_initialized:
        return

    sentry_dsn = os.getenv("SENTRY_DSN", "").strip()
    if not sentry_dsn:
        logger.info("sentry.disabled", message="Sentry DSN not found, error tracking disabled")
        return

    if not sentry_dsn.startswith(("https://", "http://")):
        logger.info(
            "sentry.disabled",
            message="Sentry DSN appears to be a placeholder, error tracking disabled",
            dsn_preview=sentry_dsn[:20],
        )
        return

    environment = os.getenv("ENVIRONMENT", "development")

    try:
        sentry_sdk.init(
            dsn=sentry_dsn,
            environment=environment,
            traces_sample_rate=0.0,
            send_default_pii=False,
            integrations=[
                FastApiIntegration(transaction_style="endpoint"),
                LoggingIntegration(level=None, event_level=None),
            ],
            before_send=filter_sensitive_data,
        )
    except BadDsn as exc:
        logger.warning(
            "sentry.init_failed",
            message="Invalid Sentry DSN, error tracking disabled",
            error=str(exc),
        )
        return

    _sentry_initialized = True
    logger.info("sentry.initialized", environment=environment)


def _is_sensitive(key: object, value: object) -> bool:
    key_str = str(key).lower()
    return any(marker in key_str for marker in SENSITIVE_KEYS) or "sql" in str(value).lower()


def filter_sensitive_data(event: dict, hint: dict) -> dict:
    """
    Drop SQL and uploaded file content from Sentry events.

    Row data from imported workbooks can hold customer names, so anything
    keyed as an upload is removed along with SQL.
    """
    extra = event.get("extra")
    if isinstance(extra, dict):
        event["extra"] = {k: v for k, v in extra.items() if not _is_sensitive(k, v)}

    breadcrumbs = event.get("breadcrumbs")
    if isinstance(breadcrumbs, dict):
        # SDK 2.x wraps breadcrumbs as {"values": [...]}
        values = breadcrumbs.get("values")
        if isinstance(values, list):
            breadcrumbs["values"] = [b for b in values if not _breadcrumb_has_sql(b)]
    elif isinstance(breadcrumbs, list):
        event["breadcrumbs"] = [b for b in breadcrumbs if not _breadcrumb_has_sql(b)]

    return event


def _breadcrumb_has_sql(breadcrumb: object) -> bool:
    if isinstance(breadcrumb, dict):
        if breadcrumb.get("category") == "query":
            return True
        return "sql" in str(breadcrumb.get("message", "")).lower()
    return "sql" in str(breadcrumb).lower()
