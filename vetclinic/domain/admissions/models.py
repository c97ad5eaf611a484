"""
Admissions Domain Models

Implements the database models for:
- Admissions (one hospital stay of one animal)
- Treatments logged against an admission
- Discharge records holding the calculated and final bill
"""

from sqlalchemy import (
    Column, String, Date, Boolean, DateTime, ForeignKey,
    Integer, Time, Text, Enum, Numeric, CheckConstraint
)
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from vetclinic.infrastructure.database import Base
from vetclinic.domain.rooms.models import gen_uuid
import enum


class AdmissionStatus(str, enum.Enum):
    """Admission status enumeration"""
    ACTIVE = "Active"
    DISCHARGED = "Discharged"
    TRANSFERRED = "Transferred"


class TreatmentType(str, enum.Enum):
    """Kind of billable clinical event"""
    MEDICATION = "Medication"
    PROCEDURE = "Procedure"
    OBSERVATION = "Observation"
    SURGERY = "Surgery"
    THERAPY = "Therapy"


class TreatmentStatus(str, enum.Enum):
    """Treatment status enumeration"""
    SCHEDULED = "Scheduled"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


class PaymentStatus(str, enum.Enum):
    PENDING = "Pending"
    PAID = "Paid"
    PARTIAL = "Partial"


class PaymentMethod(str, enum.Enum):
    CASH = "Cash"
    CARD = "Card"
    CHECK = "Check"
    INSURANCE = "Insurance"


class Admission(Base):
    """A single stay of one pet in one room"""
    __tablename__ = "admissions"

    id = Column(String(36), primary_key=True, default=gen_uuid)

    # Pet / owner / doctor references, copied from the directory at open time
    pet_id = Column(String(36), nullable=False, index=True)
    pet_name = Column(String(100), nullable=False)
    pet_species = Column(String(50))
    pet_breed = Column(String(100))
    owner_id = Column(String(36), nullable=False)
    owner_name = Column(String(200), nullable=False)
    owner_phone = Column(String(30))
    doctor_id = Column(String(36), nullable=False, index=True)
    doctor_name = Column(String(200), nullable=False)

    room_number = Column(String(20), ForeignKey("rooms.number"), nullable=False, index=True)

    admission_date = Column(Date, nullable=False, index=True)
    admission_time = Column(Time, nullable=False)
    reason = Column(Text, nullable=False)
    status = Column(Enum(AdmissionStatus), nullable=False, default=AdmissionStatus.ACTIVE, index=True)
    estimated_discharge = Column(Date)
    actual_discharge = Column(Date)

    total_bill = Column(Numeric(10, 2), nullable=False, default=0)
    daily_rate = Column(Numeric(10, 2), nullable=False)
    notes = Column(Text, nullable=False, default="")

    # Transfer chain
    transferred_from_id = Column(String(36), ForeignKey("admissions.id"))
    transferred_to_id = Column(String(36), ForeignKey("admissions.id"))

    created_at = Column(DateTime, default=func.now())
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())

    # Relationships
    room = relationship("Room", back_populates="admissions")
    treatments = relationship(
        "Treatment",
        back_populates="admission",
        order_by="Treatment.position",
        cascade="all, delete-orphan"
    )
    discharge_record = relationship(
        "DischargeRecord",
        back_populates="admission",
        uselist=False,
        cascade="all, delete-orphan"
    )

    __table_args__ = (
        CheckConstraint('total_bill >= 0', name='check_admission_total_bill'),
    )

    @property
    def is_active(self) -> bool:
        return self.status == AdmissionStatus.ACTIVE


class Treatment(Base):
    """Time-stamped billable event owned by one admission"""
    __tablename__ = "treatments"

    id = Column(String(36), primary_key=True, default=gen_uuid)
    admission_id = Column(String(36), ForeignKey("admissions.id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, nullable=False)

    treatment_date = Column(Date, nullable=False)
    treatment_time = Column(Time, nullable=False)
    treatment_type = Column(Enum(TreatmentType), nullable=False)
    description = Column(Text, nullable=False)
    doctor_name = Column(String(200))
    cost = Column(Numeric(10, 2), nullable=False, default=0)
    status = Column(Enum(TreatmentStatus), nullable=False, default=TreatmentStatus.SCHEDULED)

    created_at = Column(DateTime, default=func.now())
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())

    admission = relationship("Admission", back_populates="treatments")

    __table_args__ = (
        CheckConstraint('cost >= 0', name='check_treatment_cost'),
    )


class DischargeRecord(Base):
    """Closing record of a discharged admission.

    `calculated_bill` is the system figure and is kept even when staff
    override `final_bill`.
    """
    __tablename__ = "discharge_records"

    id = Column(String(36), primary_key=True, default=gen_uuid)
    admission_id = Column(String(36), ForeignKey("admissions.id", ondelete="CASCADE"), nullable=False, unique=True)

    discharge_date = Column(Date, nullable=False)
    discharge_time = Column(Time, nullable=False)
    discharge_notes = Column(Text, nullable=False, default="")

    follow_up_required = Column(Boolean, nullable=False, default=False)
    follow_up_date = Column(Date)
    follow_up_instructions = Column(Text)
    medications_dispensed = Column(Text)

    stay_duration_days = Column(Integer, nullable=False)
    calculated_bill = Column(Numeric(10, 2), nullable=False)
    final_bill = Column(Numeric(10, 2), nullable=False)
    payment_status = Column(Enum(PaymentStatus), nullable=False, default=PaymentStatus.PENDING)
    payment_method = Column(Enum(PaymentMethod), nullable=False, default=PaymentMethod.CASH)

    created_at = Column(DateTime, default=func.now())

    admission = relationship("Admission", back_populates="discharge_record")

    @property
    def is_overridden(self) -> bool:
        return self.final_bill != self.calculated_bill
