"""SQLite-backed implementation of PatientRepository."""

from __future__ import annotations

import sqlite3

from clinic.domain.model.patient import Patient
from clinic.domain.repository.patient_repository import PatientRepository
from clinic.infrastructure.persistence.database import from_db_datetime, to_db_datetime


class SqlitePatientRepository(PatientRepository):

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    def get_by_id(self, patient_id: int) -> Patient | None:
        row = self._conn.execute(
            "SELECT * FROM patients WHERE id = ?", (patient_id,)
        ).fetchone()
        return self._to_domain(row) if row else None

    def list_all(self) -> list[Patient]:
        rows = self._conn.execute("SELECT * FROM patients ORDER BY created_at DESC, id DESC")
        return [self._to_domain(row) for row in rows]

    def save(self, patient: Patient) -> None:
        values = (patient.code, patient.full_name, patient.phone, to_db_datetime(patient.created_at))
        if patient.id is None:
            cursor = self._conn.execute(
                "INSERT INTO patients (code, full_name, phone, created_at) VALUES (?, ?, ?, ?)",
                values,
            )
            patient.id = cursor.lastrowid
        else:
            self._conn.execute(
                "UPDATE patients SET code = ?, full_name = ?, phone = ?, created_at = ? "
                "WHERE id = ?",
                (*values, patient.id),
            )

    @staticmethod
    def _to_domain(row: sqlite3.Row) -> Patient:
        return Patient(
            id=row["id"],
            code=row["code"],
            full_name=row["full_name"],
            phone=row["phone"],
            created_at=from_db_datetime(row["created_at"]),
        )
