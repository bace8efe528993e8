from __future__ import annotations

from dataclasses import dataclass

from ..core.constants import ADMIN_EDIT_WINDOW_DAYS
from ..core.enums import Role
from .policies.base import MarkingPolicy
from .policies.today_only import TodayOnlyPolicy
from .policies.trailing_window import TrailingWindowPolicy


@dataclass
class MarkingPolicyFactory:
    """Factory Pattern: choose the date policy from the caller's role."""

    admin_window_days: int = ADMIN_EDIT_WINDOW_DAYS

    def for_role(self, role: Role) -> MarkingPolicy:
        if role == Role.ADMIN:
            return TrailingWindowPolicy(self.admin_window_days)
        return TodayOnlyPolicy()
