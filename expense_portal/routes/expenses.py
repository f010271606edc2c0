from datetime import datetime, timezone
from typing import List, Optional

from fastapi import APIRouter, Depends

from ..documents import DocumentStore
from ..schemas.expenses import Expense, ExpenseCreate, ExpenseStatusUpdate, ExpenseUpdate
from ..services import expense_filters, expenses
from .deps import get_store

router = APIRouter(prefix="/api/expenses", tags=["expenses"])


@router.get("")
def list_expenses(
    search: Optional[str] = None,
    employee: Optional[str] = None,
    month: Optional[str] = None,
    year: Optional[str] = None,
    sort: expense_filters.SortField = "date",
    order: expense_filters.SortOrder = "desc",
    group: Optional[str] = None,
    overdue: Optional[bool] = None,
    store: DocumentStore = Depends(get_store),
):
    """All expenses for the admin table; ``group=client`` nests them by client name."""
    items = expense_filters.filter_expenses(expenses.get_expenses(store), search, employee, month, year)
    if overdue:
        items = expense_filters.overdue_expenses(items)
    items = expense_filters.sort_expenses(items, sort, order)
    if group == "client":
        return expense_filters.group_by_client(items)
    return items


@router.get("/periods")
def expense_periods(store: DocumentStore = Depends(get_store)):
    items = expenses.get_expenses(store)
    return {
        "months": expense_filters.unique_months(items),
        "years": expense_filters.unique_years(items),
    }


@router.get("/overdue")
def list_overdue(user_id: Optional[str] = None, store: DocumentStore = Depends(get_store)):
    """Expenses flagged overdue with their days past due; ``user_id`` narrows to one employee."""
    today = datetime.now(timezone.utc).date()
    items = expense_filters.overdue_expenses(expenses.get_expenses(store), user_id)
    return [
        {**e.model_dump(mode="json", by_alias=True), "daysOverdue": expense_filters.days_overdue(e, today)}
        for e in expense_filters.sort_expenses(items, "date", "desc")
    ]


@router.get("/overdue/summary")
def overdue_summary(store: DocumentStore = Depends(get_store)):
    today = datetime.now(timezone.utc).date()
    items = expenses.get_expenses(store)
    return {
        "flagged": len(expense_filters.overdue_expenses(items)),
        "staleUnreceived": len(expense_filters.stale_unreceived(items, today)),
    }


@router.get("/by-user/{user_id}", response_model=List[Expense])
def list_user_expenses(user_id: str, store: DocumentStore = Depends(get_store)):
    return expenses.get_expenses_by_user(store, user_id)


@router.post("", response_model=Expense, status_code=201)
def create_expense(body: ExpenseCreate, store: DocumentStore = Depends(get_store)):
    return expenses.create_expense(store, body)


@router.get("/{expense_id}", response_model=Expense)
def get_expense(expense_id: str, store: DocumentStore = Depends(get_store)):
    return expenses.get_expense_by_id(store, expense_id)


@router.patch("/{expense_id}", response_model=Expense)
def update_expense(expense_id: str, body: ExpenseUpdate, store: DocumentStore = Depends(get_store)):
    return expenses.update_expense(store, expense_id, body)


@router.patch("/{expense_id}/status", response_model=Expense)
def update_expense_status(expense_id: str, body: ExpenseStatusUpdate, store: DocumentStore = Depends(get_store)):
    return expenses.update_status(store, expense_id, body.status)


@router.delete("/{expense_id}")
def delete_expense(expense_id: str, store: DocumentStore = Depends(get_store)):
    return {"id": expenses.delete_expense(store, expense_id)}
