from datetime import datetime
from typing import Annotated, Literal, Optional

from pydantic import BeforeValidator

from .common import CamelModel

ExpenseStatus = Literal["pending", "received"]


def _days_as_text(value):
    # Stored as text like the form input; numbers sent by API callers are accepted too
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


OverdueDays = Annotated[Optional[str], BeforeValidator(_days_as_text)]


class ExpenseCreate(CamelModel):
    user_id: str
    amount: float
    description: str
    date: Optional[str] = None
    company: Optional[str] = None
    client_name: Optional[str] = None
    candidate_name: Optional[str] = None
    sector: Optional[str] = None
    service_name: Optional[str] = None
    file_name: Optional[str] = None
    file_url: Optional[str] = None
    overdue: Optional[bool] = None
    # Grace period in days after ``date``; kept as entered
    overdue_days: OverdueDays = None


class ExpenseUpdate(CamelModel):
    amount: Optional[float] = None
    description: Optional[str] = None
    date: Optional[str] = None
    company: Optional[str] = None
    client_name: Optional[str] = None
    candidate_name: Optional[str] = None
    sector: Optional[str] = None
    service_name: Optional[str] = None
    file_name: Optional[str] = None
    file_url: Optional[str] = None
    overdue: Optional[bool] = None
    overdue_days: OverdueDays = None
    status: Optional[ExpenseStatus] = None


class ExpenseStatusUpdate(CamelModel):
    status: ExpenseStatus


class Expense(ExpenseCreate):
    id: Optional[str] = None
    status: ExpenseStatus = "pending"
    timestamp: datetime
