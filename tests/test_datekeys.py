from datetime import date, datetime, timedelta, timezone

import pytest

from daily_prophet.datekeys import DateKeyer


def test_iso_key_is_utc_calendar_date():
    keyer = DateKeyer()
    assert keyer.key_for(datetime(2026, 10, 19, 7, 0, tzinfo=timezone.utc)) == "2026-10-19"


def test_same_day_timestamps_share_a_key():
    keyer = DateKeyer()
    start = datetime(2026, 10, 19, 0, 0, 0, tzinfo=timezone.utc)
    end = datetime(2026, 10, 19, 23, 59, 59, tzinfo=timezone.utc)
    assert keyer.key_for(start) == keyer.key_for(end)


def test_one_minute_across_midnight_changes_key():
    keyer = DateKeyer()
    late = datetime(2026, 10, 18, 23, 59, tzinfo=timezone.utc)
    assert keyer.key_for(late) != keyer.key_for(late + timedelta(minutes=2))


def test_naive_datetime_is_read_as_utc():
    keyer = DateKeyer(tz="Asia/Tokyo")
    # 20:00 UTC is already the next morning in Tokyo.
    assert keyer.key_for(datetime(2026, 10, 18, 20, 0)) == "2026-10-19"


def test_configured_zone_decides_the_day():
    utc = DateKeyer()
    moscow = DateKeyer(tz="Europe/Moscow")
    ts = datetime(2026, 10, 18, 22, 30, tzinfo=timezone.utc)
    assert utc.key_for(ts) == "2026-10-18"
    assert moscow.key_for(ts) == "2026-10-19"


def test_day_month_style_uses_genitive_month_names():
    keyer = DateKeyer(style="day_month")
    assert keyer.key_for(datetime(2026, 10, 19, 12, tzinfo=timezone.utc)) == "19 октября"
    assert keyer.key_for(date(2026, 3, 1)) == "1 марта"


def test_today_accepts_explicit_now():
    keyer = DateKeyer()
    assert keyer.today(datetime(2026, 1, 2, 3, 4, tzinfo=timezone.utc)) == "2026-01-02"


def test_rejects_unknown_style_and_zone():
    with pytest.raises(ValueError):
        DateKeyer(style="weekday")
    with pytest.raises(ValueError):
        DateKeyer(tz="Mars/Olympus_Mons")
