"""
Input validation for commands entering the booking core
All checks run before any database access
"""
import re
from datetime import date, datetime
from typing import Optional

from .errors import InvalidDate, InvalidPassport, InvalidScore, ValidationError

PASSPORT_LENGTH = 10
PASSPORT_PATTERN = re.compile(r'^[A-Z0-9]{%d}$' % PASSPORT_LENGTH)
FLIGHT_NUMBER_PATTERN = re.compile(r'^[A-Z0-9]{2,16}$')

DATE_FORMATS = ('%Y-%m-%d', '%m/%d/%Y')

MIN_SCORE = 0
MAX_SCORE = 5
MAX_COMMENT_LENGTH = 1000


def validate_passport(passport_number) -> str:
    """Return the normalised passport number or raise InvalidPassport"""
    if not isinstance(passport_number, str):
        raise InvalidPassport("Passport number must be a string", field='passport_number')

    normalised = passport_number.strip().upper()
    if not PASSPORT_PATTERN.match(normalised):
        raise InvalidPassport(
            f"Passport number must be exactly {PASSPORT_LENGTH} letters or digits",
            field='passport_number'
        )
    return normalised


def parse_date(value, field: str = 'departure') -> date:
    """
    Parse a calendar date

    Accepts ``date`` objects and strings in YYYY-MM-DD or MM/DD/YYYY form.
    Month and day ranges (including days-in-month) are checked by ``strptime``.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        raise InvalidDate(f"{field} must be a date", field=field)

    text = value.strip()
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    raise InvalidDate(f"{field} '{text}' is not a valid calendar date", field=field)


def validate_birth_date(value) -> date:
    birth_date = parse_date(value, field='birth_date')
    if birth_date >= date.today():
        raise InvalidDate("birth_date must be in the past", field='birth_date')
    return birth_date


def require_text(value, field: str, max_length: int = 100) -> str:
    """Return stripped, non-blank text"""
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field} must not be blank", field=field)
    text = value.strip()
    if len(text) > max_length:
        raise ValidationError(f"{field} must be at most {max_length} characters", field=field)
    return text


def validate_flight_number(value) -> str:
    if not isinstance(value, str):
        raise ValidationError("Flight number must be a string", field='flight_num')
    flight_num = value.strip().upper()
    if not FLIGHT_NUMBER_PATTERN.match(flight_num):
        raise ValidationError(f"Invalid flight number '{value}'", field='flight_num')
    return flight_num


def validate_score(score) -> int:
    # bool is an int subclass; reject it explicitly
    if isinstance(score, bool) or not isinstance(score, int):
        raise InvalidScore("Score must be an integer", field='score')
    if not MIN_SCORE <= score <= MAX_SCORE:
        raise InvalidScore(f"Score must be between {MIN_SCORE} and {MAX_SCORE}", field='score')
    return score


def validate_comment(comment) -> Optional[str]:
    if comment is None:
        return None
    if not isinstance(comment, str):
        raise ValidationError("Comment must be text", field='comment')
    comment = comment.strip()
    if len(comment) > MAX_COMMENT_LENGTH:
        raise ValidationError(
            f"Comment must be at most {MAX_COMMENT_LENGTH} characters", field='comment'
        )
    return comment or None


def validate_positive(value, field: str) -> int:
    """Counts such as k and limit must be integers >= 1"""
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ValidationError(f"{field} must be an integer greater than 0", field=field)
    return value


def validate_id(value, field: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ValidationError(f"{field} must be a positive integer", field=field)
    return value
