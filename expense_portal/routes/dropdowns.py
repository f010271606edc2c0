from typing import List, Optional

from fastapi import APIRouter, Depends

from ..documents import DocumentStore
from ..schemas.dropdowns import DropdownItem, DropdownItemCreate, DropdownType
from ..services import dropdowns, expense_filters
from .deps import get_store

router = APIRouter(prefix="/api/dropdown-data", tags=["dropdown-data"])


@router.get("", response_model=List[DropdownItem])
def list_items(type: Optional[DropdownType] = None, store: DocumentStore = Depends(get_store)):
    return dropdowns.list_items(store, type)


@router.get("/suggestions", response_model=List[str])
def suggestions(type: DropdownType, q: Optional[str] = None, limit: int = 10, store: DocumentStore = Depends(get_store)):
    """Autocomplete for the company/client/candidate inputs."""
    return expense_filters.suggestions(dropdowns.values(store, type), q, limit)


@router.post("", response_model=DropdownItem, status_code=201)
def add_item(body: DropdownItemCreate, store: DocumentStore = Depends(get_store)):
    return dropdowns.add_item(store, body)


@router.delete("/{item_id}")
def delete_item(item_id: str, store: DocumentStore = Depends(get_store)):
    return {"id": dropdowns.delete_item(store, item_id)}
