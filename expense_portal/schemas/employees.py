from typing import Optional

from .common import CamelModel


class EmployeeBase(CamelModel):
    email: str
    name: str = ""
    sector: str = ""
    age: int = 0
    status: str = "employee"


class EmployeeUpdate(CamelModel):
    email: Optional[str] = None
    name: Optional[str] = None
    sector: Optional[str] = None
    age: Optional[int] = None
    status: Optional[str] = None


class Employee(EmployeeBase):
    id: Optional[str] = None
