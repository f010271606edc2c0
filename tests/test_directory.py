"""Tests for employees, dropdown data and the admin check."""

from __future__ import annotations

import pytest

from expense_portal.documents import DocumentNotFoundError
from expense_portal.schemas.dropdowns import DropdownItemCreate
from expense_portal.schemas.employees import EmployeeBase
from expense_portal.services import dropdowns, employees
from expense_portal.services.permissions import is_admin


class TestEmployeeService:
    def test_ensure_employee_is_idempotent(self, store) -> None:
        first = employees.ensure_employee(store, EmployeeBase(email="deva@company.com", name="Deva"))
        second = employees.ensure_employee(store, EmployeeBase(email="deva@company.com", name="Other"))
        assert first.id == second.id
        assert len(employees.get_employees(store)) == 1

    def test_lookup_by_email(self, store) -> None:
        employees.create_employee(store, EmployeeBase(email="sam@company.com", sector="Sales"))
        found = employees.get_employee_by_email(store, "sam@company.com")
        assert found is not None and found.sector == "Sales"
        assert employees.get_employee_by_email(store, "nobody@company.com") is None

    def test_missing_employee(self, store) -> None:
        with pytest.raises(DocumentNotFoundError, match="Employee not found"):
            employees.get_employee_by_id(store, "missing")

    def test_display_name_falls_back_to_email(self, store) -> None:
        roster = [
            employees.create_employee(store, EmployeeBase(email="a@company.com", name="Ana")),
            employees.create_employee(store, EmployeeBase(email="b@company.com")),
        ]
        assert employees.display_name(roster, "a@company.com") == "Ana"
        assert employees.display_name(roster, "b@company.com") == "b@company.com"
        assert employees.display_name(roster, "c@company.com") == "c@company.com"


class TestEmployeeRoutes:
    def test_create_update_search(self, client) -> None:
        created = client.post("/api/employees", json={"email": "lee@company.com", "name": "Lee", "age": 31})
        assert created.status_code == 201
        employee_id = created.json()["id"]

        patched = client.patch(f"/api/employees/{employee_id}", json={"sector": "Finance"})
        assert patched.json()["sector"] == "Finance"
        assert patched.json()["age"] == 31

        assert [e["email"] for e in client.get("/api/employees", params={"q": "LEE"}).json()] == ["lee@company.com"]
        assert client.get("/api/employees", params={"q": "zzz"}).json() == []

    def test_unknown_employee(self, client) -> None:
        resp = client.patch("/api/employees/missing", json={"name": "X"})
        assert resp.status_code == 404
        assert resp.json() == {"error": "Employee not found"}


class TestDropdowns:
    def test_add_strips_and_filters_by_type(self, store) -> None:
        dropdowns.add_item(store, DropdownItemCreate(type="company", value="  Northwind  "))
        dropdowns.add_item(store, DropdownItemCreate(type="client", value="Contoso"))
        assert dropdowns.values(store, "company") == ["Northwind"]
        assert len(dropdowns.list_items(store)) == 2

    def test_suggestions_route(self, client) -> None:
        for value in ["Contoso", "Contoso Pharma", "Fabrikam", "Northwind"]:
            assert client.post("/api/dropdown-data", json={"type": "client", "value": value}).status_code == 201
        client.post("/api/dropdown-data", json={"type": "company", "value": "Contoso Holdings"})

        resp = client.get("/api/dropdown-data/suggestions", params={"type": "client", "q": "cont"})
        assert resp.json() == ["Contoso", "Contoso Pharma"]

        limited = client.get("/api/dropdown-data/suggestions", params={"type": "client", "q": "o", "limit": 2})
        assert len(limited.json()) == 2

    def test_unknown_type_rejected(self, client) -> None:
        resp = client.post("/api/dropdown-data", json={"type": "vendor", "value": "X"})
        assert resp.status_code == 422

    def test_delete_item(self, client) -> None:
        item = client.post("/api/dropdown-data", json={"type": "sector", "value": "Retail"}).json()
        assert client.delete(f"/api/dropdown-data/{item['id']}").status_code == 200
        assert client.get("/api/dropdown-data", params={"type": "sector"}).json() == []


class TestIsAdmin:
    @pytest.mark.parametrize(
        "email,expected",
        [
            ("admin@company.com", True),
            ("Admin@Company.com ", True),
            ("deva@company.com", False),
            ("", False),
            (None, False),
        ],
    )
    def test_default_admin(self, email, expected) -> None:
        assert is_admin(email) is expected

    def test_explicit_admin_email(self) -> None:
        assert is_admin("boss@corp.io", admin_email="boss@corp.io")
        assert not is_admin("admin@company.com", admin_email="boss@corp.io")


def test_role_lookup_route(client) -> None:
    client.post("/api/employees", json={"email": "ana@company.com", "name": "Ana"})
    assert client.get("/api/employees/role/ana@company.com").json() == {
        "email": "ana@company.com",
        "name": "Ana",
        "isAdmin": False,
    }
    admin = client.get("/api/employees/role/admin@company.com").json()
    assert admin["isAdmin"] is True
    assert admin["name"] == "admin@company.com"
