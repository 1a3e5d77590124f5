"""
Booking month arithmetic.
"""

from datetime import date

import pytest

from rentify_backend.modules.bookings.services import months_between


@pytest.mark.parametrize(
    "check_in,check_out,months",
    [
        (date(2026, 1, 15), date(2026, 4, 15), 3),
        (date(2026, 1, 15), date(2026, 4, 16), 4),
        (date(2026, 1, 15), date(2026, 4, 14), 3),
        (date(2026, 1, 10), date(2026, 1, 20), 1),
        (date(2026, 1, 31), date(2026, 2, 1), 1),
        (date(2025, 11, 1), date(2026, 2, 1), 3),
    ],
)
def test_started_months_count(check_in, check_out, months):
    assert months_between(check_in, check_out) == months
