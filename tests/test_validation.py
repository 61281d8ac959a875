"""Input validation unit tests"""
from __future__ import annotations

from datetime import date, datetime

import pytest

from backend.errors import InvalidDate, InvalidPassport, InvalidScore, ValidationError
from backend.validation import (
    parse_date, require_text, validate_comment, validate_flight_number, validate_passport,
    validate_positive, validate_score
)


class TestPassport:

    def test_normalised(self):
        assert validate_passport(' ab12345678 ') == 'AB12345678'

    @pytest.mark.parametrize('value', ['AB1234567', 'AB12345678X', 'AB 2345678', 'ÄB12345678'])
    def test_rejected(self, value):
        with pytest.raises(InvalidPassport):
            validate_passport(value)


class TestDates:

    @pytest.mark.parametrize('value, expected', [
        ('2030-06-15', date(2030, 6, 15)),
        ('06/15/2030', date(2030, 6, 15)),
        (' 2028-02-29 ', date(2028, 2, 29)),
        (date(2030, 1, 1), date(2030, 1, 1)),
        (datetime(2030, 1, 1, 13, 45), date(2030, 1, 1)),
    ])
    def test_parsed(self, value, expected):
        assert parse_date(value) == expected

    @pytest.mark.parametrize('value', ['2029-02-29', '2030-04-31', '2030-6-155', '15.06.2030', 20300615])
    def test_rejected(self, value):
        with pytest.raises(InvalidDate):
            parse_date(value)

    def test_field_name_reported(self):
        with pytest.raises(InvalidDate) as exc_info:
            parse_date('nope', field='birth_date')
        assert exc_info.value.field == 'birth_date'


class TestScalars:

    @pytest.mark.parametrize('score', [0, 3, 5])
    def test_scores_in_range(self, score):
        assert validate_score(score) == score

    def test_score_out_of_range(self):
        with pytest.raises(InvalidScore):
            validate_score(6)

    def test_flight_number_upper_cased(self):
        assert validate_flight_number(' aa1001 ') == 'AA1001'

    def test_require_text(self):
        assert require_text('  JFK ', 'origin') == 'JFK'
        with pytest.raises(ValidationError):
            require_text('x' * 61, 'origin', max_length=60)

    def test_blank_comment_is_none(self):
        assert validate_comment('   ') is None
        assert validate_comment(None) is None

    def test_positive(self):
        assert validate_positive(1, 'k') == 1
        with pytest.raises(ValidationError):
            validate_positive(False, 'k')
