from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Optional

from ..common.validators import require_email, require_non_empty
from ..core.constants import DEFAULT_PAGE, DEFAULT_PAGE_LIMIT
from ..core.exceptions import ConflictError, DuplicateKeyViolation, NotFoundError
from .model import Employee
from .repository import EmployeeRepository

EMPLOYEE_NOT_FOUND = "Employee not found"
EMPLOYEE_EXISTS = "Employee email or identifier already exists"


@dataclass(frozen=True)
class EmployeePage:
    data: list[Employee]
    page: int
    limit: int
    total: int


class EmployeeService:
    def __init__(self, employees: EmployeeRepository):
        self._employees = employees

    def create(self, *, names: str, email: str, employee_identifier: str, phone_number: str) -> Employee:
        employee_id = str(uuid.uuid4())
        try:
            self._employees.create(
                employee_id=employee_id,
                names=require_non_empty(names, "names"),
                email=require_email(email),
                employee_identifier=require_non_empty(employee_identifier, "employeeIdentifier"),
                phone_number=require_non_empty(phone_number, "phoneNumber"),
            )
        except DuplicateKeyViolation:
            raise ConflictError(EMPLOYEE_EXISTS) from None
        return self.get(employee_id)

    def get(self, employee_id: str) -> Employee:
        employee = self._employees.get_by_id(employee_id)
        if not employee:
            raise NotFoundError(EMPLOYEE_NOT_FOUND)
        return employee

    def list(self, *, page: int = DEFAULT_PAGE, limit: int = DEFAULT_PAGE_LIMIT) -> EmployeePage:
        offset = (page - 1) * limit
        rows = self._employees.list_page(offset=offset, limit=limit)
        return EmployeePage(data=list(rows), page=page, limit=limit, total=self._employees.count())

    def update(
        self,
        employee_id: str,
        *,
        names: Optional[str] = None,
        email: Optional[str] = None,
        employee_identifier: Optional[str] = None,
        phone_number: Optional[str] = None,
    ) -> Employee:
        self.get(employee_id)

        fields: dict = {}
        if names is not None:
            fields["names"] = require_non_empty(names, "names")
        if email is not None:
            fields["email"] = require_email(email)
        if employee_identifier is not None:
            fields["employee_identifier"] = require_non_empty(employee_identifier, "employeeIdentifier")
        if phone_number is not None:
            fields["phone_number"] = require_non_empty(phone_number, "phoneNumber")

        if fields:
            try:
                self._employees.update(employee_id, fields=fields)
            except DuplicateKeyViolation:
                raise ConflictError(EMPLOYEE_EXISTS) from None
        return self.get(employee_id)

    def delete(self, employee_id: str) -> None:
        # attendances go with it (ON DELETE CASCADE)
        if not self._employees.delete_by_id(employee_id):
            raise NotFoundError(EMPLOYEE_NOT_FOUND)
