from datetime import date, timedelta

import pytest

from school_attendance.attendance.factory import MarkingPolicyFactory
from school_attendance.attendance.policies.today_only import TodayOnlyPolicy
from school_attendance.attendance.policies.trailing_window import TrailingWindowPolicy
from school_attendance.core.enums import Role
from school_attendance.core.exceptions import FutureDate, WindowExceeded

TODAY = date(2024, 6, 20)


def test_factory_picks_policy_by_role():
    factory = MarkingPolicyFactory()

    assert isinstance(factory.for_role(Role.TEACHER), TodayOnlyPolicy)
    assert isinstance(factory.for_role(Role.ADMIN), TrailingWindowPolicy)


def test_teacher_marks_today_only():
    policy = TodayOnlyPolicy()
    policy.check(target=TODAY, today=TODAY)

    with pytest.raises(WindowExceeded):
        policy.check(target=TODAY - timedelta(days=1), today=TODAY)


def test_future_dates_are_refused_for_every_role():
    for role in Role:
        with pytest.raises(FutureDate):
            MarkingPolicyFactory().for_role(role).check(target=TODAY + timedelta(days=1), today=TODAY)


def test_admin_window_is_31_days_including_today():
    policy = TrailingWindowPolicy(31)

    policy.check(target=TODAY, today=TODAY)
    policy.check(target=TODAY - timedelta(days=30), today=TODAY)
    with pytest.raises(WindowExceeded):
        policy.check(target=TODAY - timedelta(days=31), today=TODAY)


def test_admin_window_is_configurable():
    policy = MarkingPolicyFactory(admin_window_days=7).for_role(Role.ADMIN)

    policy.check(target=TODAY - timedelta(days=6), today=TODAY)
    with pytest.raises(WindowExceeded):
        policy.check(target=TODAY - timedelta(days=7), today=TODAY)
