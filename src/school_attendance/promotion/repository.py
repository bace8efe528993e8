from __future__ import annotations

from typing import Protocol, Sequence

from ..classes.model import ClassKey, SchoolClass
from .model import PromotionOutcome


class PromotionRepository(Protocol):
    def promote(
        self,
        *,
        source: SchoolClass,
        destination: ClassKey,
        student_ids: Sequence[int],
    ) -> PromotionOutcome:
        """Fetch-or-create the destination class and move the students, in one transaction.

        Raises UnauthorizedMembership if any id is not a member of `source` (nothing is
        written, including the destination class), and ConflictError if a concurrent
        transaction won the race for the destination key.
        """

        raise NotImplementedError
