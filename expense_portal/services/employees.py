from typing import Iterable, List, Optional

import structlog

from ..documents import DocumentNotFoundError, DocumentStore
from ..documents.collections import COLLECTION_EMPLOYEES
from ..schemas.employees import Employee, EmployeeBase, EmployeeUpdate

logger = structlog.get_logger(__name__)


def create_employee(store: DocumentStore, employee: EmployeeBase) -> Employee:
    employee_id = store.add(COLLECTION_EMPLOYEES, employee.to_document())
    logger.info("employee_created", employee_id=employee_id, email=employee.email)
    return Employee(id=employee_id, **employee.model_dump())


def get_employees(store: DocumentStore) -> List[Employee]:
    return [Employee.model_validate(d) for d in store.list(COLLECTION_EMPLOYEES)]


def get_employee_by_id(store: DocumentStore, employee_id: str) -> Employee:
    doc = store.get(COLLECTION_EMPLOYEES, employee_id)
    if doc is None:
        raise DocumentNotFoundError("Employee not found")
    return Employee.model_validate(doc)


def get_employee_by_email(store: DocumentStore, email: str) -> Optional[Employee]:
    docs = store.query(COLLECTION_EMPLOYEES, filters=[("email", email)])
    return Employee.model_validate(docs[0]) if docs else None


def ensure_employee(store: DocumentStore, employee: EmployeeBase) -> Employee:
    """Create the employee unless one with the same email already exists."""
    existing = get_employee_by_email(store, employee.email)
    if existing:
        return existing
    return create_employee(store, employee)


def update_employee(store: DocumentStore, employee_id: str, changes: EmployeeUpdate) -> Employee:
    try:
        store.update(COLLECTION_EMPLOYEES, employee_id, changes.to_document())
    except DocumentNotFoundError as e:
        raise DocumentNotFoundError("Employee not found") from e
    return get_employee_by_id(store, employee_id)


def delete_employee(store: DocumentStore, employee_id: str) -> str:
    store.delete(COLLECTION_EMPLOYEES, employee_id)
    logger.info("employee_deleted", employee_id=employee_id)
    return employee_id


def display_name(employees: Iterable[Employee], email: str) -> str:
    """Name shown next to an expense; falls back to the email itself."""
    for employee in employees:
        if employee.email == email and employee.name:
            return employee.name
    return email
