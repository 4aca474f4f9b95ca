from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Employee:
    """Thực thể miền (domain): Nhân viên.

    Lưu ý: Đây là đối tượng dữ liệu thuần (không chứa code truy cập DB).
    """

    employee_id: str
    names: str
    email: str
    employee_identifier: str
    phone_number: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.employee_id,
            "names": self.names,
            "email": self.email,
            "employeeIdentifier": self.employee_identifier,
            "phoneNumber": self.phone_number,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }
