"""
Seed the configured document store with an admin, a test employee, dropdown
reference data and one admin-to-employee message.

Usage:
  python scripts/seed_test_data.py

This script is idempotent for employees and dropdown values (matched by email /
type+value). A new test message is sent on every run.
"""

from expense_portal.config import settings
from expense_portal.documents import create_document_store
from expense_portal.schemas.dropdowns import DropdownItemCreate
from expense_portal.schemas.employees import EmployeeBase
from expense_portal.schemas.messages import MessageCreate
from expense_portal.services import dropdowns, employees, messages


DROPDOWN_SEED = {
    "company": ["Acme Staffing", "Northwind Recruiting"],
    "client": ["Contoso Ltd", "Fabrikam Inc"],
    "candidate": ["Jordan Lee", "Sam Rivera"],
    "sector": ["Administration", "Engineering", "Healthcare"],
}


def ensure_dropdown(store, item_type: str, value: str) -> None:
    if value in dropdowns.values(store, item_type):
        return
    dropdowns.add_item(store, DropdownItemCreate(type=item_type, value=value))


def main() -> None:
    store = create_document_store(settings)

    admin = employees.ensure_employee(
        store,
        EmployeeBase(email=settings.admin_email, name="Admin User", sector="Administration", age=35, status="admin"),
    )
    user = employees.ensure_employee(
        store,
        EmployeeBase(email="test.employee@company.com", name="Test Employee", sector="Engineering", age=28),
    )

    for item_type, seed_values in DROPDOWN_SEED.items():
        for value in seed_values:
            ensure_dropdown(store, item_type, value)

    messages.send_message(
        store,
        MessageCreate(
            sender_id=admin.email,
            sender_name=admin.name,
            receiver_id=user.email,
            receiver_name=user.name,
            subject="Test Message",
            content="This is a test message from the admin.",
        ),
    )
    inbox = messages.get_user_messages(store, user.email)
    sent = messages.get_admin_messages(store, admin.email)
    print(f"Seeded {admin.email} and {user.email}")
    print(f"User has {len(inbox)} messages; admin has sent {len(sent)} messages")


if __name__ == "__main__":
    main()
