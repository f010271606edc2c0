"""Collection names shared by every document store backend."""

COLLECTION_MESSAGES = "messages"
COLLECTION_EXPENSES = "expenses"
COLLECTION_EMPLOYEES = "employees"
COLLECTION_DROPDOWN_DATA = "dropdownData"
