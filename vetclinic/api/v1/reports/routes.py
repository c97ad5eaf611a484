from dataclasses import asdict

from fastapi import APIRouter, Depends

from vetclinic.api.deps import get_admission_service
from vetclinic.core.config import settings
from vetclinic.domain.admissions.service import AdmissionService
from vetclinic.api.v1.reports.schemas import AdmissionStatsResponse

router = APIRouter()


@router.get("/stats", response_model=AdmissionStatsResponse)
def admission_stats(service: AdmissionService = Depends(get_admission_service)):
    """Occupancy and billing counters for the admissions dashboard"""
    return AdmissionStatsResponse(**asdict(service.stats()), currency=settings.CURRENCY_CODE)
