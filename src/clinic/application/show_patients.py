"""Application service: Show / List Patients use cases (queries)."""

from __future__ import annotations

from clinic.application.dto import PatientDTO, patient_to_dto
from clinic.domain.exceptions import EntityNotFoundError
from clinic.domain.repository.unit_of_work import UnitOfWork


class ShowPatientHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, patient_id: int) -> PatientDTO:
        with self._uow as uow:
            patient = uow.patients.get_by_id(patient_id)
        if patient is None:
            raise EntityNotFoundError(f"Patient #{patient_id} not found")
        return patient_to_dto(patient)


class ListPatientsHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self) -> list[PatientDTO]:
        with self._uow as uow:
            return [patient_to_dto(p) for p in uow.patients.list_all()]
