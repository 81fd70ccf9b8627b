"""Controller de Student (escopado por organisation)."""

from __future__ import annotations

from typing import Any

from itslanguage.controllers._common import BaseController, expect_list, require_field
from itslanguage.exceptions import InvalidArgumentError
from itslanguage.models import Student


def _students_path(organisation_id: str) -> str:
    return f"/organisations/{organisation_id}/students"


def _to_student(organisation_id: str, data: dict[str, Any]) -> Student:
    return Student.model_validate({**data, "organisationId": organisation_id})


class StudentController(BaseController):
    async def create_student(self, student: Student) -> Student:
        if not isinstance(student, Student):
            raise InvalidArgumentError('student parameter of type "Student" is required')
        organisation_id = require_field(student.organisation_id, "organisationId")

        data = await self._connection.secure_post(
            _students_path(organisation_id),
            json=student.to_api("id", "first_name", "last_name", "gender", "birth_year"),
        )
        return _to_student(organisation_id, data)

    async def get_student(self, organisation_id: str | None, student_id: str | None) -> Student:
        organisation_id = require_field(organisation_id, "organisationId")
        require_field(student_id, "studentId")
        data = await self._connection.secure_get(f"{_students_path(organisation_id)}/{student_id}")
        return _to_student(organisation_id, data)

    async def list_students(self, organisation_id: str | None) -> list[Student]:
        organisation_id = require_field(organisation_id, "organisationId")
        path = _students_path(organisation_id)
        data = await self._connection.secure_get(path)
        return [_to_student(organisation_id, item) for item in expect_list(data, path)]
