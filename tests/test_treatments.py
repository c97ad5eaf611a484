import pytest
from datetime import date, time
from decimal import Decimal

from vetclinic.core.exceptions import InvalidTransitionError, NotFoundError, ValidationError
from vetclinic.domain.admissions.models import TreatmentStatus, TreatmentType
from vetclinic.api.v1.admissions.schemas import TreatmentCreate


@pytest.fixture
def admission(admit, general_room, buddy):
    return admit(buddy, "GEN-01")


@pytest.mark.integration
@pytest.mark.treatments
class TestTreatmentTimeline:

    def test_add_treatment_defaults(self, admission_service, admission):
        treatment = admission_service.add_treatment(admission.id, TreatmentCreate(
            type=TreatmentType.OBSERVATION, description="  Vitals check  ", cost=Decimal("15")
        ))

        assert treatment.description == "Vitals check"
        assert treatment.status == TreatmentStatus.SCHEDULED
        assert treatment.treatment_date == date(2024, 1, 24)
        assert treatment.treatment_time == time(9, 30)
        assert treatment.doctor_name == "Dr. Sarah Wilson"
        assert treatment.cost == Decimal("15.00")

    def test_add_treatment_refreshes_running_bill(self, admission_service, admission):
        admission_service.add_treatment(admission.id, TreatmentCreate(description="Fluids", cost=Decimal("20")))

        assert admission_service.get_admission(admission.id).total_bill == Decimal("80.00")

    def test_blank_description_rejected(self, admission_service, admission):
        with pytest.raises(ValidationError):
            admission_service.add_treatment(admission.id, TreatmentCreate(description="   ", cost=Decimal("5")))

        assert len(admission_service.list_treatments(admission.id)) == 0

    def test_timeline_newest_first(self, admission_service, admission):
        for day, label in ((24, "first"), (26, "third"), (25, "second")):
            admission_service.add_treatment(admission.id, TreatmentCreate(
                treatment_date=date(2024, 1, day), treatment_time=time(10, 0), description=label
            ))

        timeline = admission_service.list_treatments(admission.id)

        assert [t.description for t in timeline] == ["third", "second", "first"]

    def test_timeline_ties_keep_insertion_order(self, admission_service, admission):
        for label in ("a", "b", "c"):
            admission_service.add_treatment(admission.id, TreatmentCreate(
                treatment_date=date(2024, 1, 24), treatment_time=time(12, 0), description=label
            ))

        timeline = admission_service.list_treatments(admission.id)

        assert [t.description for t in timeline] == ["a", "b", "c"]

    def test_timeline_total_excludes_cancelled(self, admission_service, admission):
        admission_service.add_treatment(admission.id, TreatmentCreate(description="Fluids", cost=Decimal("20")))
        admission_service.add_treatment(admission.id, TreatmentCreate(
            description="X-ray", cost=Decimal("40"), status=TreatmentStatus.CANCELLED
        ))

        assert admission_service.list_treatments(admission.id).total_cost() == Decimal("20.00")


@pytest.mark.integration
@pytest.mark.treatments
class TestTreatmentStatus:

    def test_complete_scheduled_treatment(self, admission_service, admission):
        treatment = admission_service.add_treatment(admission.id, TreatmentCreate(description="Fluids"))

        updated = admission_service.update_treatment_status(treatment.id, TreatmentStatus.COMPLETED)

        assert updated.status == TreatmentStatus.COMPLETED

    def test_cancel_lowers_running_bill(self, admission_service, admission):
        treatment = admission_service.add_treatment(admission.id, TreatmentCreate(description="X-ray", cost=Decimal("40")))
        assert admission_service.get_admission(admission.id).total_bill == Decimal("100.00")

        admission_service.update_treatment_status(treatment.id, TreatmentStatus.CANCELLED)

        assert admission_service.get_admission(admission.id).total_bill == Decimal("60.00")

    def test_completed_cannot_return_to_scheduled(self, admission_service, admission):
        treatment = admission_service.add_treatment(admission.id, TreatmentCreate(
            description="Pain medication", status=TreatmentStatus.COMPLETED
        ))

        with pytest.raises(InvalidTransitionError) as exc_info:
            admission_service.update_treatment_status(treatment.id, TreatmentStatus.SCHEDULED)

        assert exc_info.value.error_code == "INVALID_TRANSITION"
        assert admission_service.list_treatments(admission.id).to_list()[0].status == TreatmentStatus.COMPLETED

    def test_cancelled_is_terminal(self, admission_service, admission):
        treatment = admission_service.add_treatment(admission.id, TreatmentCreate(
            description="X-ray", status=TreatmentStatus.CANCELLED
        ))

        with pytest.raises(InvalidTransitionError):
            admission_service.update_treatment_status(treatment.id, TreatmentStatus.COMPLETED)

    def test_unknown_treatment(self, admission_service, admission):
        with pytest.raises(NotFoundError):
            admission_service.update_treatment_status("missing", TreatmentStatus.COMPLETED)

    def test_treatment_of_other_admission_not_found(self, admission_service, admit, admission, luna):
        other = admit(luna, "GEN-01")
        treatment = admission_service.add_treatment(other.id, TreatmentCreate(description="Fluids"))

        with pytest.raises(NotFoundError):
            admission_service.update_treatment_status(
                treatment.id, TreatmentStatus.COMPLETED, admission_id=admission.id
            )


@pytest.mark.integration
@pytest.mark.treatments
class TestRemoveTreatment:

    def test_remove_scheduled_treatment(self, admission_service, admission):
        keep = admission_service.add_treatment(admission.id, TreatmentCreate(description="Fluids", cost=Decimal("20")))
        drop = admission_service.add_treatment(admission.id, TreatmentCreate(description="X-ray", cost=Decimal("40")))

        admission_service.remove_treatment(drop.id, admission_id=admission.id)

        remaining = admission_service.list_treatments(admission.id).to_list()
        assert [t.id for t in remaining] == [keep.id]
        assert admission_service.get_admission(admission.id).total_bill == Decimal("80.00")

    def test_completed_treatment_not_removable(self, admission_service, admission):
        treatment = admission_service.add_treatment(admission.id, TreatmentCreate(
            description="Pain medication", status=TreatmentStatus.COMPLETED
        ))

        with pytest.raises(InvalidTransitionError):
            admission_service.remove_treatment(treatment.id)

        assert len(admission_service.list_treatments(admission.id)) == 1
