from vetclinic.domain.rooms.models import Room
from vetclinic.domain.patients.models import Pet, Doctor
from vetclinic.domain.admissions.models import Admission, Treatment, DischargeRecord
