from datetime import datetime, timezone
from typing import List

import structlog

from ..documents import DocumentNotFoundError, DocumentStore
from ..documents.collections import COLLECTION_EXPENSES
from ..schemas.expenses import Expense, ExpenseCreate, ExpenseStatus, ExpenseUpdate
from .expense_filters import flag_overdue

logger = structlog.get_logger(__name__)


def create_expense(store: DocumentStore, expense: ExpenseCreate) -> Expense:
    now = datetime.now(timezone.utc)
    data = {**expense.to_document(), "status": "pending", "timestamp": now}
    overdue = flag_overdue(expense, now.date())
    if overdue is not None:
        data["overdue"] = overdue
    expense_id = store.add(COLLECTION_EXPENSES, data)
    logger.info("expense_created", expense_id=expense_id, user_id=expense.user_id, amount=expense.amount)
    return Expense.model_validate({"id": expense_id, **data})


def get_expenses(store: DocumentStore) -> List[Expense]:
    return [Expense.model_validate(d) for d in store.list(COLLECTION_EXPENSES)]


def get_expenses_by_user(store: DocumentStore, user_id: str) -> List[Expense]:
    docs = store.query(
        COLLECTION_EXPENSES,
        filters=[("userId", user_id)],
        order_by="timestamp",
        descending=True,
    )
    return [Expense.model_validate(d) for d in docs]


def get_expense_by_id(store: DocumentStore, expense_id: str) -> Expense:
    doc = store.get(COLLECTION_EXPENSES, expense_id)
    if doc is None:
        raise DocumentNotFoundError("Expense not found")
    return Expense.model_validate(doc)


def update_expense(store: DocumentStore, expense_id: str, changes: ExpenseUpdate) -> Expense:
    try:
        store.update(COLLECTION_EXPENSES, expense_id, changes.to_document())
    except DocumentNotFoundError as e:
        raise DocumentNotFoundError("Expense not found") from e
    return get_expense_by_id(store, expense_id)


def update_status(store: DocumentStore, expense_id: str, status: ExpenseStatus) -> Expense:
    expense = update_expense(store, expense_id, ExpenseUpdate(status=status))
    logger.info("expense_status_changed", expense_id=expense_id, status=status)
    return expense


def delete_expense(store: DocumentStore, expense_id: str) -> str:
    store.delete(COLLECTION_EXPENSES, expense_id)
    logger.info("expense_deleted", expense_id=expense_id)
    return expense_id
