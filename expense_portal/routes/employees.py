from typing import List, Optional

from fastapi import APIRouter, Depends

from ..config import Settings
from ..documents import DocumentStore
from ..schemas.employees import Employee, EmployeeBase, EmployeeUpdate
from ..services import employees
from ..services.permissions import is_admin
from .deps import get_settings, get_store

router = APIRouter(prefix="/api/employees", tags=["employees"])


@router.get("", response_model=List[Employee])
def list_employees(q: Optional[str] = None, store: DocumentStore = Depends(get_store)):
    rows = employees.get_employees(store)
    if q:
        needle = q.lower()
        rows = [e for e in rows if needle in e.email.lower() or needle in e.name.lower()]
    return rows


@router.get("/role/{email}")
def employee_role(email: str, settings: Settings = Depends(get_settings), store: DocumentStore = Depends(get_store)):
    """Who the signed-in email is: the name to show and whether to open the admin views."""
    return {
        "email": email,
        "name": employees.display_name(employees.get_employees(store), email),
        "isAdmin": is_admin(email, settings.admin_email),
    }


@router.post("", response_model=Employee, status_code=201)
def create_employee(body: EmployeeBase, store: DocumentStore = Depends(get_store)):
    return employees.create_employee(store, body)


@router.get("/{employee_id}", response_model=Employee)
def get_employee(employee_id: str, store: DocumentStore = Depends(get_store)):
    return employees.get_employee_by_id(store, employee_id)


@router.patch("/{employee_id}", response_model=Employee)
def update_employee(employee_id: str, body: EmployeeUpdate, store: DocumentStore = Depends(get_store)):
    return employees.update_employee(store, employee_id, body)


@router.delete("/{employee_id}")
def delete_employee(employee_id: str, store: DocumentStore = Depends(get_store)):
    return {"id": employees.delete_employee(store, employee_id)}
