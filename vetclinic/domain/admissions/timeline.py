"""
Treatment Timeline

Read side and transition rules for the treatments of one admission.
"""

from datetime import datetime
from decimal import Decimal
from typing import Dict, FrozenSet, Iterator, List, Sequence

from vetclinic.core.exceptions import InvalidTransitionError
from vetclinic.domain.admissions.models import Treatment, TreatmentStatus
from vetclinic.domain.billing.calculator import billable_treatment_total

# Completed and Cancelled are terminal
ALLOWED_TREATMENT_TRANSITIONS: Dict[TreatmentStatus, FrozenSet[TreatmentStatus]] = {
    TreatmentStatus.SCHEDULED: frozenset({TreatmentStatus.COMPLETED, TreatmentStatus.CANCELLED}),
    TreatmentStatus.COMPLETED: frozenset(),
    TreatmentStatus.CANCELLED: frozenset(),
}


def ensure_treatment_transition(treatment: Treatment, new_status: TreatmentStatus) -> None:
    current = TreatmentStatus(treatment.status)
    if new_status not in ALLOWED_TREATMENT_TRANSITIONS[current]:
        raise InvalidTransitionError(
            f"Treatment cannot move from {current.value} to {new_status.value}",
            details={
                "treatment_id": treatment.id,
                "from_status": current.value,
                "to_status": new_status.value,
            }
        )


def ensure_removable(treatment: Treatment) -> None:
    """Only treatments still Scheduled may be deleted; others must be cancelled"""
    if treatment.status != TreatmentStatus.SCHEDULED:
        raise InvalidTransitionError(
            f"Only scheduled treatments can be removed, this one is {TreatmentStatus(treatment.status).value}",
            details={"treatment_id": treatment.id, "status": TreatmentStatus(treatment.status).value}
        )


def _performed_at(treatment: Treatment) -> datetime:
    return datetime.combine(treatment.treatment_date, treatment.treatment_time)


class TreatmentTimeline:
    """Treatments newest first, ties kept in insertion order.

    Sorting happens on each iteration, so the timeline can be walked any
    number of times and always reflects the list it wraps.
    """

    def __init__(self, treatments: Sequence[Treatment]):
        self._treatments = treatments

    def __iter__(self) -> Iterator[Treatment]:
        by_insertion = sorted(self._treatments, key=lambda t: t.position)
        # sorted() keeps equal keys in input order even with reverse=True
        yield from sorted(by_insertion, key=_performed_at, reverse=True)

    def __len__(self) -> int:
        return len(self._treatments)

    def to_list(self) -> List[Treatment]:
        return list(self)

    def total_cost(self) -> Decimal:
        """Billable cost of the timeline (cancelled entries excluded)"""
        return billable_treatment_total(self._treatments)
