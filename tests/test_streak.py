"""
Unit tests for the streak calculator (pure, no DB).
"""
import pytest
from datetime import date, timedelta

from areuok.schemas.checkin import CheckinRecord
from areuok.services.streak import calculate_checkin, parse_day


def rec(last: str, streak: int, history: list[str], name: str = "Ana") -> CheckinRecord:
    return CheckinRecord(name=name, last_signin_date=last, streak=streak, signin_history=history)


class TestFirstCheckin:
    def test_no_previous_record_starts_at_one(self):
        r = calculate_checkin(None, "Ana", date(2024, 1, 1))
        assert r.streak == 1
        assert r.last_signin_date == "2024-01-01"
        assert r.signin_history == ["2024-01-01"]
        assert r.name == "Ana"


class TestSameDay:
    def test_same_day_is_noop(self):
        prev = rec("2024-01-03", 3, ["2024-01-01", "2024-01-02", "2024-01-03"])
        r = calculate_checkin(prev, "Ana", date(2024, 1, 3))
        assert r is prev
        assert r.streak == 3
        assert r.signin_history == ["2024-01-01", "2024-01-02", "2024-01-03"]

    def test_same_day_keeps_previous_name(self):
        prev = rec("2024-01-03", 1, ["2024-01-03"], name="Ana")
        r = calculate_checkin(prev, "Someone else", date(2024, 1, 3))
        assert r.name == "Ana"


class TestContinue:
    def test_three_consecutive_days(self):
        r = None
        streaks = []
        for d in (date(2024, 1, 1), date(2024, 1, 2), date(2024, 1, 3)):
            r = calculate_checkin(r, "Ana", d)
            streaks.append(r.streak)
        assert streaks == [1, 2, 3]
        assert r.signin_history == ["2024-01-01", "2024-01-02", "2024-01-03"]

    @pytest.mark.parametrize("n", [1, 7, 31, 400])
    def test_n_consecutive_days_gives_streak_n(self, n):
        start = date(2023, 12, 1)
        r = None
        for i in range(n):
            r = calculate_checkin(r, "Ana", start + timedelta(days=i))
        assert r.streak == n
        assert len(r.signin_history) == n

    def test_crosses_month_and_year(self):
        prev = rec("2023-12-31", 5, ["2023-12-31"])
        r = calculate_checkin(prev, "Ana", date(2024, 1, 1))
        assert r.streak == 6

    def test_leap_day(self):
        prev = rec("2024-02-28", 2, ["2024-02-28"])
        r = calculate_checkin(prev, "Ana", date(2024, 2, 29))
        assert r.streak == 3

    def test_history_not_duplicated(self):
        prev = rec("2024-01-01", 1, ["2024-01-01", "2024-01-02"])
        r = calculate_checkin(prev, "Ana", date(2024, 1, 2))
        assert r.signin_history.count("2024-01-02") == 1

    def test_previous_record_not_mutated(self):
        prev = rec("2024-01-01", 1, ["2024-01-01"])
        calculate_checkin(prev, "Ana", date(2024, 1, 2))
        assert prev.signin_history == ["2024-01-01"]
        assert prev.streak == 1


class TestReset:
    def test_gap_resets_streak_and_history(self):
        prev = calculate_checkin(None, "Ana", date(2024, 1, 1))
        r = calculate_checkin(prev, "Ana", date(2024, 1, 5))
        assert r.streak == 1
        assert r.signin_history == ["2024-01-05"]
        assert r.last_signin_date == "2024-01-05"

    def test_one_missed_day_resets(self):
        prev = rec("2024-01-01", 10, ["2024-01-01"])
        r = calculate_checkin(prev, "Ana", date(2024, 1, 3))
        assert r.streak == 1

    def test_last_date_in_future_resets(self):
        prev = rec("2024-02-01", 4, ["2024-02-01"])
        r = calculate_checkin(prev, "Ana", date(2024, 1, 15))
        assert r.streak == 1
        assert r.signin_history == ["2024-01-15"]

    @pytest.mark.parametrize("bad", ["", "yesterday", "2024-13-01", "01/02/2024"])
    def test_unparsable_last_date_resets(self, bad):
        prev = rec(bad, 9, ["whatever"])
        r = calculate_checkin(prev, "Ana", date(2024, 1, 2))
        assert r.streak == 1
        assert r.signin_history == ["2024-01-02"]


class TestParseDay:
    def test_valid(self):
        assert parse_day("2024-01-31") == date(2024, 1, 31)

    def test_invalid(self):
        assert parse_day("2024-02-30") is None
