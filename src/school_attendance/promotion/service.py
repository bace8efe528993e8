from __future__ import annotations

import logging
from typing import Iterable, Optional

from ..classes.model import ClassKey, SchoolClass
from ..classes.repository import ClassRepository
from ..common.validators import require_id, require_ids
from ..core.constants import PROMOTION_CONFLICT_RETRIES, TERMINAL_STANDARD
from ..core.context import RequestContext
from ..core.exceptions import AlreadyGraduated, AuthorizationError, ClassNotFound, ConcurrentUpdate
from .model import PromotionResult
from .repository import PromotionRepository

logger = logging.getLogger(__name__)


def destination_for(source: SchoolClass) -> ClassKey:
    """Next standard, same section, next academic year, same school."""

    if source.standard >= TERMINAL_STANDARD:
        raise AlreadyGraduated(
            f"Students in grade {TERMINAL_STANDARD} cannot be promoted further. They have graduated."
        )
    return ClassKey(
        standard=source.standard + 1,
        section=source.section,
        academic_year=source.academic_year.next(),
        school_id=source.school_id,
    )


class PromotionService:
    """Use case: move a cohort from its class to the next standard and academic year."""

    def __init__(
        self,
        classes: ClassRepository,
        promotions: PromotionRepository,
        *,
        conflict_retries: int = PROMOTION_CONFLICT_RETRIES,
    ):
        self._classes = classes
        self._promotions = promotions
        self._retries = int(conflict_retries)

    def promote(
        self,
        ctx: RequestContext,
        *,
        source_class_id: Optional[int],
        student_ids: Optional[Iterable],
    ) -> PromotionResult:
        if not ctx.is_admin:
            raise AuthorizationError("Only admins can promote students")
        ids = require_ids(student_ids, "Student IDs")
        source_id = require_id(source_class_id, "Current class ID")

        source = self._classes.get_by_id(source_id)
        if not source or source.school_id != ctx.school_id:
            raise ClassNotFound("Class not found")

        destination = destination_for(source)

        attempt = 0
        while True:
            try:
                outcome = self._promotions.promote(source=source, destination=destination, student_ids=ids)
                break
            except ConcurrentUpdate:
                if attempt >= self._retries:
                    raise
                attempt += 1
                logger.warning(
                    "Promotion into %s (%s) hit a concurrent writer, retrying (%d/%d)",
                    destination.label,
                    destination.academic_year,
                    attempt,
                    self._retries,
                )

        result = PromotionResult(source=source, destination=destination, outcome=outcome)
        logger.info(
            "%s by user %s (destination id=%s%s)",
            result.message,
            ctx.user_id,
            outcome.destination_class_id,
            ", created" if outcome.created_destination else "",
        )
        return result
