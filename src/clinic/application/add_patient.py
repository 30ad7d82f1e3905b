"""Application service: Add Patient use case."""

from __future__ import annotations

from clinic.application.clock import Clock, millis_code, utcnow
from clinic.application.dto import PatientDTO, patient_to_dto
from clinic.domain.model.patient import Patient
from clinic.domain.repository.unit_of_work import UnitOfWork


class AddPatientHandler:

    def __init__(self, uow: UnitOfWork, clock: Clock = utcnow) -> None:
        self._uow = uow
        self._clock = clock

    def handle(self, full_name: str, phone: str | None = None) -> PatientDTO:
        patient = Patient.create(
            code=millis_code("BN", self._clock()), full_name=full_name, phone=phone
        )
        with self._uow as uow:
            uow.patients.save(patient)
            uow.commit()
        return patient_to_dto(patient)
