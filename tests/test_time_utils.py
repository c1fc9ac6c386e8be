from datetime import UTC, date

from hours.app.core.time import local_today, utc_now


def test_utc_now_is_timezone_aware_utc():
    value = utc_now()
    assert value.tzinfo is UTC


def test_local_today_is_a_date():
    assert isinstance(local_today(), date)
