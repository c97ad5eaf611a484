"""
Admissions API Schemas

Pydantic models for admission, treatment and discharge requests and responses.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional, List
from datetime import datetime, date, time
from decimal import Decimal
from vetclinic.domain.admissions.models import (
    AdmissionStatus, TreatmentType, TreatmentStatus,
    PaymentStatus, PaymentMethod
)


# ==================== Treatment Schemas ====================

class TreatmentCreate(BaseModel):
    """Schema for logging a treatment; date/time default to now"""
    treatment_date: Optional[date] = None
    treatment_time: Optional[time] = None
    type: TreatmentType = TreatmentType.MEDICATION
    description: str = Field("", max_length=2000)
    doctor_name: Optional[str] = Field(None, max_length=200)
    cost: Decimal = Field(Decimal("0"), ge=0, max_digits=10, decimal_places=2)
    status: TreatmentStatus = TreatmentStatus.SCHEDULED


class TreatmentStatusUpdate(BaseModel):
    status: TreatmentStatus


class TreatmentResponse(BaseModel):
    id: str
    admission_id: str
    treatment_date: date
    treatment_time: time
    type: TreatmentType = Field(validation_alias="treatment_type")
    description: str
    doctor_name: Optional[str] = None
    cost: Decimal
    status: TreatmentStatus

    model_config = ConfigDict(from_attributes=True)


class TimelineResponse(BaseModel):
    admission_id: str
    total_cost: Decimal
    treatments: List[TreatmentResponse]


# ==================== Admission Schemas ====================

class AdmissionCreate(BaseModel):
    """Schema for admitting a pet; pet and doctor come from the directory"""
    pet_id: str
    doctor_id: str
    room_number: str
    reason: str = Field("", max_length=2000)
    estimated_discharge: Optional[date] = None
    notes: Optional[str] = Field(None, max_length=5000)


class TransferRequest(BaseModel):
    new_room_number: str


class DischargeCreate(BaseModel):
    """Schema for discharging; date/time default to now"""
    discharge_date: Optional[date] = None
    discharge_time: Optional[time] = None
    discharge_notes: str = ""
    follow_up_required: bool = False
    follow_up_date: Optional[date] = None
    follow_up_instructions: Optional[str] = None
    medications_dispensed: Optional[str] = None
    final_bill: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    payment_status: PaymentStatus = PaymentStatus.PENDING
    payment_method: PaymentMethod = PaymentMethod.CASH

    @field_validator("follow_up_instructions", "medications_dispensed")
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            return None
        return v


class DischargeRecordResponse(BaseModel):
    discharge_date: date
    discharge_time: time
    discharge_notes: str
    follow_up_required: bool
    follow_up_date: Optional[date] = None
    follow_up_instructions: Optional[str] = None
    medications_dispensed: Optional[str] = None
    stay_duration_days: int
    calculated_bill: Decimal
    final_bill: Decimal
    payment_status: PaymentStatus
    payment_method: PaymentMethod

    model_config = ConfigDict(from_attributes=True)


class AdmissionResponse(BaseModel):
    id: str
    pet_id: str
    pet_name: str
    pet_species: Optional[str] = None
    pet_breed: Optional[str] = None
    owner_id: str
    owner_name: str
    owner_phone: Optional[str] = None
    doctor_id: str
    doctor_name: str
    room_number: str
    admission_date: date
    admission_time: time
    reason: str
    status: AdmissionStatus
    estimated_discharge: Optional[date] = None
    actual_discharge: Optional[date] = None
    total_bill: Decimal
    daily_rate: Decimal
    notes: str
    transferred_from_id: Optional[str] = None
    transferred_to_id: Optional[str] = None
    treatments: List[TreatmentResponse] = []
    discharge_record: Optional[DischargeRecordResponse] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class BillPreviewResponse(BaseModel):
    admission_id: str
    discharge_date: date
    stay_duration_days: int
    daily_rate: Decimal
    room_charges: Decimal
    treatment_charges: Decimal
    calculated_bill: Decimal
