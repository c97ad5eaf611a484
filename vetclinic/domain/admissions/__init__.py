# Admissions domain module
from vetclinic.domain.admissions.models import (
    Admission,
    AdmissionStatus,
    Treatment,
    TreatmentType,
    TreatmentStatus,
    DischargeRecord,
    PaymentStatus,
    PaymentMethod,
)

__all__ = [
    "Admission",
    "AdmissionStatus",
    "Treatment",
    "TreatmentType",
    "TreatmentStatus",
    "DischargeRecord",
    "PaymentStatus",
    "PaymentMethod",
]
