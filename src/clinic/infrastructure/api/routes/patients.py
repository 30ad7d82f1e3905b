from __future__ import annotations

from fastapi import APIRouter, Depends

from clinic.application.add_patient import AddPatientHandler
from clinic.application.clock import Clock
from clinic.application.show_patients import ListPatientsHandler, ShowPatientHandler
from clinic.infrastructure.api.dependencies import RowId, camelize, get_clock, get_uow
from clinic.infrastructure.api.schemas import PatientIn

router = APIRouter(prefix="/api/patients", tags=["patients"])


@router.get("")
def list_patients(uow=Depends(get_uow)):
    return camelize(ListPatientsHandler(uow).handle())


@router.get("/{patient_id}")
def get_patient(patient_id: RowId, uow=Depends(get_uow)):
    return camelize(ShowPatientHandler(uow).handle(patient_id))


@router.post("", status_code=201)
def create_patient(payload: PatientIn, uow=Depends(get_uow), clock: Clock = Depends(get_clock)):
    return camelize(AddPatientHandler(uow, clock).handle(payload.full_name, payload.phone))
