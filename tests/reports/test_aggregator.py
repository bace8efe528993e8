from school_attendance.attendance.model import StatusCounts
from school_attendance.core.enums import AttendanceStatus, Gender
from school_attendance.holidays.model import SchoolDays
from school_attendance.reports.aggregator import combine, day_breakdown, gender_breakdown, percentage, period_stats, round2

P, A, L = AttendanceStatus.PRESENT, AttendanceStatus.ABSENT, AttendanceStatus.LATE


def test_unmarked_days_count_as_present():
    stats = period_stats(SchoolDays(total_days=10, holiday_count=0), StatusCounts(present=3, absent=1, late=1))

    assert stats.unmarked == 5
    assert stats.effective_present == 9
    assert stats.attendance_percentage == 90.0
    assert stats.late_percentage == 10.0


def test_effective_present_plus_absent_equals_school_days():
    stats = period_stats(SchoolDays(total_days=31, holiday_count=4), StatusCounts(present=10, absent=6, late=2))

    assert stats.school_days == 27
    assert stats.effective_present + stats.absent == stats.school_days


def test_unmarked_as_present_can_be_switched_off():
    stats = period_stats(
        SchoolDays(total_days=10, holiday_count=0),
        StatusCounts(present=3, absent=1, late=1),
        unmarked_counts_as_present=False,
    )

    assert stats.effective_present == 4
    assert stats.attendance_percentage == 40.0


def test_zero_school_days_yield_zero_percentages():
    stats = period_stats(SchoolDays(total_days=2, holiday_count=2), StatusCounts())

    assert stats.school_days == 0
    assert stats.unmarked == 0
    assert stats.attendance_percentage == 0.0
    assert stats.late_percentage == 0.0
    assert percentage(5, 0) == 0.0


def test_rounding_is_half_up():
    assert round2("83.335") == 83.34
    assert percentage(1, 3) == 33.33
    assert percentage(2, 3) == 66.67


def test_combine_recomputes_from_sums():
    april = period_stats(SchoolDays(30, 0), StatusCounts(present=30))
    may = period_stats(SchoolDays(10, 0), StatusCounts(absent=10))

    total = combine([april, may])

    assert total.school_days == 40
    assert total.effective_present == 30
    # an average of the monthly figures would give 50.0
    assert total.attendance_percentage == 75.0


def test_combine_of_nothing_is_empty():
    total = combine([])

    assert total.school_days == 0
    assert total.attendance_percentage == 0.0


def test_day_breakdown_keeps_unmarked_separate():
    b = day_breakdown([P, P, L, A, None])

    assert (b.total, b.present, b.late, b.absent, b.unmarked) == (5, 2, 1, 1, 1)
    assert b.present_including_late == 3
    assert b.attendance_percentage == 60.0


def test_gender_breakdown():
    rows = [(Gender.MALE, s) for s in (P, P, P, P, L, A)] + [(Gender.FEMALE, s) for s in (P, P, P, L)]

    overall = day_breakdown(s for _, s in rows)
    by_gender = gender_breakdown(rows)

    assert overall.attendance_percentage == 90.0
    assert by_gender[Gender.MALE].attendance_percentage == 83.33
    assert by_gender[Gender.FEMALE].attendance_percentage == 100.0


def test_gender_breakdown_reports_both_genders_when_one_is_missing():
    by_gender = gender_breakdown([("male", P)])

    assert by_gender[Gender.FEMALE].total == 0
    assert by_gender[Gender.FEMALE].attendance_percentage == 0.0
