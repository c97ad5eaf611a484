from fastapi import APIRouter
from vetclinic.core.exceptions import ErrorResponse
from vetclinic.api.v1.rooms import routes as rooms
from vetclinic.api.v1.admissions import routes as admissions
from vetclinic.api.v1.patients import routes as patients
from vetclinic.api.v1.reports import routes as reports

# Bodies produced by the domain exception handler in main.py
ERROR_RESPONSES = {
    404: {"model": ErrorResponse, "description": "Resource not found"},
    409: {"model": ErrorResponse, "description": "Conflicting state"},
    500: {"model": ErrorResponse, "description": "Database error"},
    503: {"model": ErrorResponse, "description": "Resource locked"},
}

api_router = APIRouter()
api_router.include_router(rooms.router, prefix="/rooms", tags=["rooms"], responses=ERROR_RESPONSES)
api_router.include_router(admissions.router, prefix="/admissions", tags=["admissions"], responses=ERROR_RESPONSES)
api_router.include_router(patients.router, prefix="/patients", tags=["patients"], responses=ERROR_RESPONSES)
api_router.include_router(reports.router, prefix="/reports", tags=["reports"], responses=ERROR_RESPONSES)
