from __future__ import annotations

from dataclasses import dataclass

from ..classes.model import ClassKey, SchoolClass


@dataclass(frozen=True)
class PromotionOutcome:
    """What the store did inside the promotion transaction."""

    destination_class_id: int
    created_destination: bool
    moved: int


@dataclass(frozen=True)
class PromotionResult:
    source: SchoolClass
    destination: ClassKey
    outcome: PromotionOutcome

    @property
    def message(self) -> str:
        return (
            f"Successfully promoted {self.outcome.moved} student(s) from {self.source.label} "
            f"to {self.destination.label} ({self.destination.academic_year})"
        )

    def to_dict(self) -> dict:
        return {
            "message": self.message,
            "count": self.outcome.moved,
            "from_class": self.source.label,
            "to_class": self.destination.label,
            "academic_year": str(self.destination.academic_year),
            "destination_class_id": self.outcome.destination_class_id,
            "created_destination": self.outcome.created_destination,
        }
