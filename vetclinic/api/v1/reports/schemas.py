from pydantic import BaseModel
from decimal import Decimal


class AdmissionStatsResponse(BaseModel):
    """Dashboard counters, recomputed on every request"""
    total_active: int
    total_rooms: int
    occupied_rooms: int
    available_rooms: int
    today_admissions: int
    active_bill_total: Decimal
    currency: str
