# Test type: unit
# Validation: input guards -- positive, non-negative, range, choice, duration
# Command: pytest test/test_validator.py -v

import math

import pytest

from app.errors import InvalidInput
from app.utils.validator import (
    MAX_YEARS,
    require_choice,
    require_duration,
    require_non_negative,
    require_positive,
    require_range,
)


class TestRequirePositive:
    def test_positive_passes_through(self):
        assert require_positive("principal", 10.5) == 10.5

    def test_zero_rejected(self):
        with pytest.raises(InvalidInput) as exc:
            require_positive("principal", 0)
        assert exc.value.field == "principal"
        assert exc.value.message == "Principal must be positive"

    def test_negative_rejected(self):
        with pytest.raises(InvalidInput):
            require_positive("monthly_investment", -1)

    def test_nan_and_inf_rejected(self):
        with pytest.raises(InvalidInput) as exc:
            require_positive("rate", math.inf)
        assert "finite" in exc.value.message
        with pytest.raises(InvalidInput):
            require_positive("rate", math.nan)


class TestRequireNonNegative:
    def test_zero_is_allowed(self):
        """Zero is not negative."""
        assert require_non_negative("deductions", 0) == 0

    def test_negative_rejected(self):
        with pytest.raises(InvalidInput) as exc:
            require_non_negative("current_savings", -5)
        assert exc.value.message == "Current savings cannot be negative"


class TestRequireRange:
    def test_bounds_inclusive(self):
        assert require_range("current_age", 18, 18, 40) == 18
        assert require_range("current_age", 40, 18, 40) == 40

    def test_out_of_range_message(self):
        with pytest.raises(InvalidInput) as exc:
            require_range("current_age", 41, 18, 40)
        assert exc.value.message == "Current age must be between 18 and 40"

    def test_large_bounds_use_separators(self):
        with pytest.raises(InvalidInput) as exc:
            require_range("principal", 4_000_000, 1000, 3_000_000)
        assert exc.value.message == "Principal must be between 1,000 and 3,000,000"


class TestRequireChoice:
    def test_member_passes(self):
        assert require_choice("regime", "old", ("old", "new")) == "old"

    def test_dict_keys_accepted_as_choices(self):
        assert require_choice("fire_type", "lean", {"lean": 30, "mid": 25}) == "lean"

    def test_non_member_rejected(self):
        with pytest.raises(InvalidInput) as exc:
            require_choice("frequency", 3, (1, 2, 4, 12))
        assert exc.value.message == "Frequency must be one of: 1, 2, 4, 12"

    def test_invalid_input_is_value_error(self):
        with pytest.raises(ValueError):
            require_choice("regime", "flat", ("old", "new"))


class TestRequireDuration:
    def test_longest_horizon_allowed(self):
        assert require_duration("years", MAX_YEARS) == 100

    def test_beyond_horizon_rejected(self):
        with pytest.raises(InvalidInput) as exc:
            require_duration("years", 101)
        assert exc.value.message == "Years must be between 0 and 100"

    def test_zero_rejected_as_non_positive(self):
        with pytest.raises(InvalidInput) as exc:
            require_duration("tenure", 0)
        assert exc.value.message == "Tenure must be positive"
