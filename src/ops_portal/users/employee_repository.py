from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .employee_model import Employee


class EmployeeRepository(Protocol):
    def get_by_id(self, employee_id: str) -> Optional[Employee]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Employee]:
        raise NotImplementedError

    def list_security_personnel(self) -> Sequence[Employee]:
        raise NotImplementedError
