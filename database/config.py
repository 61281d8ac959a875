"""
Runtime configuration for the booking core
Values come from the environment (optionally a ``.env`` file)
"""
import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()

DEFAULT_DATABASE_URL = 'postgresql://localhost/airline_booking'


def _env_bool(name: str, default: str = 'False') -> bool:
    return os.getenv(name, default).lower() in ('1', 'true', 'yes')


@dataclass(frozen=True)
class Settings:
    """Database and admission settings"""
    database_url: str = DEFAULT_DATABASE_URL
    echo: bool = False
    pool_min: int = 2
    pool_max: int = 40
    lock_timeout_ms: int = 5000
    booking_max_retries: int = 5
    booking_retry_delay: float = 0.01
    log_level: str = 'INFO'


def load_settings(**overrides) -> Settings:
    """
    Build settings from environment variables

    Args:
        **overrides: Explicit values that win over the environment

    Returns:
        Settings instance

    Raises:
        ValueError: If a count or timeout is out of range
    """
    values = {
        'database_url': os.getenv('DATABASE_URL', DEFAULT_DATABASE_URL),
        'echo': _env_bool('DB_ECHO'),
        'pool_min': int(os.getenv('DB_POOL_MIN', '2')),
        'pool_max': int(os.getenv('DB_POOL_MAX', '40')),
        'lock_timeout_ms': int(os.getenv('DB_LOCK_TIMEOUT_MS', '5000')),
        'booking_max_retries': int(os.getenv('BOOKING_MAX_RETRIES', '5')),
        'booking_retry_delay': float(os.getenv('BOOKING_RETRY_DELAY', '0.01')),
        'log_level': os.getenv('LOG_LEVEL', 'INFO').upper(),
    }
    values.update({key: value for key, value in overrides.items() if value is not None})
    settings = Settings(**values)
    _check_ranges(settings)
    return settings


def _check_ranges(settings: Settings) -> None:
    if settings.booking_max_retries < 1:
        raise ValueError("BOOKING_MAX_RETRIES must be at least 1")
    if settings.booking_retry_delay < 0:
        raise ValueError("BOOKING_RETRY_DELAY must not be negative")
    if settings.lock_timeout_ms < 0:
        raise ValueError("DB_LOCK_TIMEOUT_MS must not be negative")
    if settings.pool_min < 0 or settings.pool_max < max(settings.pool_min, 1):
        raise ValueError("DB_POOL_MAX must be at least 1 and not below DB_POOL_MIN")
