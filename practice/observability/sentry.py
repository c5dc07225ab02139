# File: practice/observability/sentry.py | Version: 2.0 | Title: Optional Sentry initialization
import logging

import sentry_sdk

from practice.core.config import settings

log = logging.getLogger(__name__)


def init_sentry_if_configured() -> bool:
    """Initialise Sentry when SENTRY_DSN is set. Returns True if enabled."""
    dsn = settings.SENTRY_DSN.strip()
    if not dsn:
        log.info("Sentry disabled (no SENTRY_DSN).")
        return False

    traces = settings.SENTRY_TRACES_SAMPLE_RATE
    sentry_sdk.init(
        dsn=dsn,
        environment=settings.SENTRY_ENVIRONMENT,
        traces_sample_rate=traces,
        profiles_sample_rate=settings.SENTRY_PROFILES_SAMPLE_RATE,
    )
    log.info("Sentry initialized (environment=%s).", settings.SENTRY_ENVIRONMENT)
    return True
