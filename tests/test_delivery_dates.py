"""Tests for delivery date arithmetic."""

from datetime import date

import pytest

from foodcare.models.subscription import Frequency
from foodcare.services.delivery_dates import _add_months, next_delivery_date, reminder_window


class TestNextDeliveryDate:
    def test_weekly(self):
        assert next_delivery_date(Frequency.WEEKLY, date(2025, 1, 20)) == date(2025, 1, 27)

    def test_biweekly(self):
        assert next_delivery_date(Frequency.BIWEEKLY, date(2025, 1, 20)) == date(2025, 2, 3)

    def test_monthly(self):
        assert next_delivery_date(Frequency.MONTHLY, date(2025, 1, 15)) == date(2025, 2, 15)

    def test_monthly_clamps_to_end_of_february(self):
        assert next_delivery_date(Frequency.MONTHLY, date(2025, 1, 31)) == date(2025, 2, 28)

    def test_monthly_clamps_in_leap_year(self):
        assert next_delivery_date(Frequency.MONTHLY, date(2024, 1, 31)) == date(2024, 2, 29)

    def test_monthly_crosses_year(self):
        assert next_delivery_date(Frequency.MONTHLY, date(2025, 12, 31)) == date(2026, 1, 31)

    def test_accepts_string_values(self):
        assert next_delivery_date("weekly", date(2025, 1, 1)) == date(2025, 1, 8)

    def test_unknown_frequency_raises(self):
        with pytest.raises(ValueError, match="Unknown frequency"):
            next_delivery_date("daily", date(2025, 1, 1))

    @pytest.mark.parametrize("frequency", list(Frequency))
    @pytest.mark.parametrize(
        "from_date",
        [date(2025, 1, 31), date(2024, 2, 29), date(2025, 12, 31), date(2025, 6, 1)],
    )
    def test_always_after_from_date(self, frequency, from_date):
        assert next_delivery_date(frequency, from_date) > from_date


class TestAddMonths:
    def test_keeps_day_when_valid(self):
        assert _add_months(date(2025, 3, 30), 1) == date(2025, 4, 30)

    def test_clamps_31_to_30(self):
        assert _add_months(date(2025, 3, 31), 1) == date(2025, 4, 30)

    def test_multiple_months(self):
        assert _add_months(date(2025, 11, 30), 3) == date(2026, 2, 28)


class TestReminderWindow:
    def test_inclusive_range(self):
        assert reminder_window(date(2025, 1, 18), 3) == (date(2025, 1, 18), date(2025, 1, 21))

    def test_zero_days(self):
        assert reminder_window(date(2025, 1, 18), 0) == (date(2025, 1, 18), date(2025, 1, 18))
