"""
Search, filter, sort and grouping used by the expense tables, overdue tracking, and dropdown autocomplete.
"""
import re
from datetime import date, timedelta
from typing import Dict, Iterable, List, Literal, Optional

from ..schemas.expenses import Expense, ExpenseCreate

SortField = Literal["employee", "amount", "date", "description"]
SortOrder = Literal["asc", "desc"]

UNKNOWN_CLIENT = "Unknown Client"
# Unreceived expenses older than this are counted as overdue in the admin sidebar
STALE_AFTER_DAYS = 30

# Fixed English names so filtering does not depend on the process locale
MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)


def month_name(expense: Expense) -> str:
    return MONTH_NAMES[expense.timestamp.month - 1]


def _matches(expense: Expense, term: str) -> bool:
    fields = (expense.description, expense.user_id, expense.company, expense.client_name, expense.sector)
    return any(term in f.lower() for f in fields if f)


def filter_expenses(
    expenses: Iterable[Expense],
    search: Optional[str] = None,
    employee: Optional[str] = None,
    month: Optional[str] = None,
    year: Optional[str] = None,
) -> List[Expense]:
    """``None`` or ``"all"`` disables a filter."""
    result = list(expenses)
    if search:
        term = search.lower()
        result = [e for e in result if _matches(e, term)]
    if employee and employee != "all":
        result = [e for e in result if e.user_id == employee]
    if month and month != "all":
        result = [e for e in result if month_name(e) == month]
    if year and year != "all":
        result = [e for e in result if str(e.timestamp.year) == str(year)]
    return result


_SORT_KEYS = {
    "employee": lambda e: e.user_id.casefold(),
    "amount": lambda e: e.amount,
    "date": lambda e: e.timestamp,
    "description": lambda e: e.description.casefold(),
}


def sort_expenses(expenses: Iterable[Expense], field: SortField = "date", order: SortOrder = "desc") -> List[Expense]:
    if field not in _SORT_KEYS:
        raise ValueError(f"Unknown sort field: {field}")
    return sorted(expenses, key=_SORT_KEYS[field], reverse=(order == "desc"))


def group_by_client(expenses: Iterable[Expense]) -> Dict[str, List[Expense]]:
    groups: Dict[str, List[Expense]] = {}
    for expense in expenses:
        name = expense.client_name.strip() if expense.client_name else UNKNOWN_CLIENT
        groups.setdefault(name, []).append(expense)
    return groups


def unique_months(expenses: Iterable[Expense]) -> List[str]:
    return sorted({month_name(e) for e in expenses})


def unique_years(expenses: Iterable[Expense]) -> List[str]:
    return sorted({str(e.timestamp.year) for e in expenses}, key=int, reverse=True)


def suggestions(options: Iterable[str], term: Optional[str], limit: int = 10) -> List[str]:
    if not term:
        return []
    needle = term.lower()
    return sorted(o for o in options if needle in o.lower())[:limit]


def grace_days(overdue_days: Optional[str]) -> Optional[int]:
    """Leading integer of the entered grace period, or None when there is none."""
    match = re.match(r"\s*([+-]?\d+)", overdue_days or "")
    return int(match.group(1)) if match else None


def _parse_date(value: Optional[str]) -> Optional[date]:
    if not value:
        return None
    try:
        return date.fromisoformat(value[:10])
    except ValueError:
        return None


def expense_date(expense: Expense) -> date:
    """The entered expense date, falling back to the submission day."""
    return _parse_date(expense.date) or expense.timestamp.date()


def flag_overdue(expense: ExpenseCreate, today: date) -> Optional[bool]:
    """Overdue flag to store for a new expense.

    With a grace period and a date the flag is computed (due on date + grace
    days, overdue from that day on); otherwise whatever was entered is kept.
    """
    days = grace_days(expense.overdue_days)
    entered = _parse_date(expense.date)
    if days is None or entered is None:
        return expense.overdue
    return entered + timedelta(days=days) <= today


def days_overdue(expense: Expense, today: date) -> int:
    """Days past the due date, counting the current day once it has started.

    Without a grace period this is the distance from the expense date.
    """
    days = grace_days(expense.overdue_days)
    if days is not None:
        due = expense_date(expense) + timedelta(days=days)
        return max((today - due).days + 1, 0)
    delta = (today - expense_date(expense)).days
    return delta + 1 if delta >= 0 else -delta


def overdue_expenses(expenses: Iterable[Expense], user_id: Optional[str] = None) -> List[Expense]:
    """Expenses flagged overdue, optionally only one user's."""
    return [e for e in expenses if e.overdue is True and (user_id is None or e.user_id == user_id)]


def stale_unreceived(expenses: Iterable[Expense], today: date, days: int = STALE_AFTER_DAYS) -> List[Expense]:
    cutoff = today - timedelta(days=days)
    return [e for e in expenses if e.status != "received" and expense_date(e) <= cutoff]
