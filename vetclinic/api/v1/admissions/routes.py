"""
Admissions API Routes

API endpoints for the admission lifecycle, the treatment timeline and
discharge billing.
"""

from fastapi import APIRouter, Depends, Query, Response, status
from pydantic import ValidationError as PydanticValidationError
from typing import List, Optional
from datetime import date

from vetclinic.api.deps import get_admission_service, get_patient_directory
from vetclinic.core.exceptions import ValidationError
from vetclinic.domain.admissions.service import AdmissionService
from vetclinic.domain.patients.service import PatientDirectory
from vetclinic.domain.reporting.views import AdmissionFilters, DateRange
from vetclinic.api.v1.admissions.schemas import (
    # Admission schemas
    AdmissionCreate, AdmissionResponse, TransferRequest,
    # Treatment schemas
    TreatmentCreate, TreatmentStatusUpdate, TreatmentResponse, TimelineResponse,
    # Discharge schemas
    DischargeCreate, BillPreviewResponse
)

router = APIRouter()


def admission_filters(
    status_filter: str = Query("all", alias="status"),
    doctor_id: str = Query("all"),
    room_type: str = Query("all"),
    date_range: DateRange = Query(DateRange.ALL),
    date_from: Optional[date] = Query(None),
    date_to: Optional[date] = Query(None)
) -> AdmissionFilters:
    try:
        return AdmissionFilters(
            status=status_filter,
            doctor_id=doctor_id,
            room_type=room_type,
            date_range=date_range,
            date_from=date_from,
            date_to=date_to
        )
    except PydanticValidationError as exc:
        raise ValidationError(
            "Invalid admission filters",
            details={"errors": [error["msg"] for error in exc.errors()]}
        )


# ==================== Admission Endpoints ====================

@router.post("", response_model=AdmissionResponse, status_code=status.HTTP_201_CREATED)
def open_admission(
    admission_data: AdmissionCreate,
    service: AdmissionService = Depends(get_admission_service),
    directory: PatientDirectory = Depends(get_patient_directory)
):
    """Admit a pet into a room with a free slot"""
    pet, owner, doctor = directory.references_for(admission_data.pet_id, admission_data.doctor_id)
    return service.open_admission(
        pet=pet,
        owner=owner,
        doctor=doctor,
        room_number=admission_data.room_number,
        reason=admission_data.reason,
        estimated_discharge=admission_data.estimated_discharge,
        notes=admission_data.notes
    )


@router.get("", response_model=List[AdmissionResponse])
def list_admissions(
    filters: AdmissionFilters = Depends(admission_filters),
    service: AdmissionService = Depends(get_admission_service)
):
    """List admissions matching the given filters, newest first"""
    return service.list_admissions(filters)


@router.get("/{admission_id}", response_model=AdmissionResponse)
def get_admission(admission_id: str, service: AdmissionService = Depends(get_admission_service)):
    return service.get_admission(admission_id)


@router.post("/{admission_id}/transfer", response_model=AdmissionResponse, status_code=status.HTTP_201_CREATED)
def transfer_admission(
    admission_id: str,
    transfer: TransferRequest,
    service: AdmissionService = Depends(get_admission_service)
):
    """Move the stay to another room; returns the new linked admission"""
    return service.transfer_admission(admission_id, transfer.new_room_number)


# ==================== Treatment Endpoints ====================

@router.post(
    "/{admission_id}/treatments",
    response_model=TreatmentResponse,
    status_code=status.HTTP_201_CREATED
)
def add_treatment(
    admission_id: str,
    treatment_data: TreatmentCreate,
    service: AdmissionService = Depends(get_admission_service)
):
    """Log a treatment against an active admission"""
    return service.add_treatment(admission_id, treatment_data)


@router.get("/{admission_id}/treatments", response_model=TimelineResponse)
def get_treatment_timeline(admission_id: str, service: AdmissionService = Depends(get_admission_service)):
    """Treatments newest first with the billable total"""
    timeline = service.list_treatments(admission_id)
    return TimelineResponse(
        admission_id=admission_id,
        total_cost=timeline.total_cost(),
        treatments=[TreatmentResponse.model_validate(t) for t in timeline]
    )


@router.patch("/{admission_id}/treatments/{treatment_id}", response_model=TreatmentResponse)
def update_treatment_status(
    admission_id: str,
    treatment_id: str,
    update: TreatmentStatusUpdate,
    service: AdmissionService = Depends(get_admission_service)
):
    return service.update_treatment_status(treatment_id, update.status, admission_id=admission_id)


@router.delete("/{admission_id}/treatments/{treatment_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_treatment(
    admission_id: str,
    treatment_id: str,
    service: AdmissionService = Depends(get_admission_service)
):
    """Remove a treatment that is still scheduled"""
    service.remove_treatment(treatment_id, admission_id=admission_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ==================== Discharge Endpoints ====================

@router.get("/{admission_id}/bill-preview", response_model=BillPreviewResponse)
def preview_bill(
    admission_id: str,
    discharge_date: Optional[date] = Query(None),
    service: AdmissionService = Depends(get_admission_service)
):
    """Bill the admission would get if discharged on `discharge_date` (default today)"""
    breakdown = service.preview_bill(admission_id, discharge_date)
    return BillPreviewResponse(
        admission_id=admission_id,
        discharge_date=discharge_date or service.clock().date(),
        stay_duration_days=breakdown.stay_duration_days,
        daily_rate=breakdown.daily_rate,
        room_charges=breakdown.room_charges,
        treatment_charges=breakdown.treatment_charges,
        calculated_bill=breakdown.calculated_bill
    )


@router.post("/{admission_id}/discharge", response_model=AdmissionResponse)
def discharge_admission(
    admission_id: str,
    discharge_data: DischargeCreate,
    service: AdmissionService = Depends(get_admission_service)
):
    """Discharge an active admission and free its room"""
    return service.discharge_admission(admission_id, discharge_data)
