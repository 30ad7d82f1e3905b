"""Abstract repository for Patient records."""

from __future__ import annotations

from abc import ABC, abstractmethod

from clinic.domain.model.patient import Patient


class PatientRepository(ABC):

    @abstractmethod
    def get_by_id(self, patient_id: int) -> Patient | None:
        """Return a patient by ID, or None if not found."""

    @abstractmethod
    def list_all(self) -> list[Patient]:
        """Return every patient, newest first."""

    @abstractmethod
    def save(self, patient: Patient) -> None:
        """Persist a new or updated patient (assigns ``id`` on insert)."""
