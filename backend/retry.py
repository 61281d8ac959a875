"""
Retry helper for units of work that can lose a race to a concurrent transaction
"""
import logging
import time

from database import get_db_manager

from .errors import Busy, ConflictError

logger = logging.getLogger(__name__)


def run_with_retry(operation, *args, max_retries: int = None, retry_delay: float = None, **kwargs):
    """
    Run ``operation`` and retry it on ConflictError with exponential backoff

    Args:
        operation: Callable performing one complete transaction
        max_retries: Attempts before giving up (defaults to settings); at least one attempt always runs
        retry_delay: Initial backoff in seconds (defaults to settings)

    Returns:
        Whatever ``operation`` returns

    Raises:
        Busy: If every attempt conflicted
    """
    if max_retries is None or retry_delay is None:
        settings = get_db_manager().settings
        max_retries = settings.booking_max_retries if max_retries is None else max_retries
        retry_delay = settings.booking_retry_delay if retry_delay is None else retry_delay

    max_retries = max(1, max_retries)

    for attempt in range(max_retries):
        try:
            return operation(*args, **kwargs)
        except ConflictError as e:
            if attempt < max_retries - 1:
                logger.debug("%s conflicted (attempt %d/%d): %s",
                             operation.__name__, attempt + 1, max_retries, e)
                time.sleep(retry_delay * (2 ** attempt))
                continue
            logger.warning("%s gave up after %d attempts", operation.__name__, max_retries)
            raise Busy("Unable to complete the request due to high concurrency. Please try again.") from e
