"""
Runtime configuration for the scorecard uploader
Values come from environment variables with sensible defaults
"""

import logging
import os

GRINT_BASE_URL = os.environ.get('GRINT_BASE_URL', 'https://www.thegrint.com')
GRINT_TIMEOUT = os.environ.get('GRINT_TIMEOUT', '15')
LOG_LEVEL = os.environ.get('SCORECARD_LOG_LEVEL', 'INFO')

logger = logging.getLogger(__name__)


def get_grint_config():
    """Settings used by GrintClient, re-read from the environment on each call"""
    base_url = os.environ.get('GRINT_BASE_URL', GRINT_BASE_URL).rstrip('/')
    raw_timeout = os.environ.get('GRINT_TIMEOUT', GRINT_TIMEOUT)
    try:
        timeout = float(raw_timeout)
    except ValueError:
        logger.warning("Ignoring GRINT_TIMEOUT=%s (not a number)", raw_timeout)
        timeout = 15.0

    return {
        'base_url': base_url,
        'timeout': timeout,
    }


def configure_logging(level=None):
    """Set up root logging once for scripts and lambda-style entry points"""
    level_name = (level or os.environ.get('SCORECARD_LOG_LEVEL', LOG_LEVEL)).upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )


def get_auth_token():
    """Shared secret callers must send in X-Auth-Token; unset means every request is refused"""
    return os.environ.get('AUTH_TOKEN', '')
