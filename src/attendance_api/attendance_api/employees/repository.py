from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..database.transaction import Transaction
from .model import Employee


class EmployeeRepository(Protocol):
    """Giao diện repository cho Employee.

    Lưu ý (DIP): tầng service phụ thuộc vào interface này, không phụ thuộc trực tiếp DB cụ thể.
    """

    def get_by_id(self, employee_id: str) -> Optional[Employee]:
        raise NotImplementedError

    def lock_by_id(self, tx: Transaction, employee_id: str) -> Optional[Employee]:
        """Read the employee row with an exclusive lock held until ``tx`` ends."""

        raise NotImplementedError

    def list_all(self) -> Sequence[Employee]:
        raise NotImplementedError

    def list_page(self, *, offset: int, limit: int) -> Sequence[Employee]:
        raise NotImplementedError

    def count(self) -> int:
        raise NotImplementedError

    def create(
        self,
        *,
        employee_id: str,
        names: str,
        email: str,
        employee_identifier: str,
        phone_number: str,
    ) -> None:
        raise NotImplementedError

    def update(self, employee_id: str, *, fields: dict) -> bool:
        raise NotImplementedError

    def delete_by_id(self, employee_id: str) -> bool:
        raise NotImplementedError
