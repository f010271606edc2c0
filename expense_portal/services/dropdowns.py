from typing import List, Optional

import structlog

from ..documents import DocumentStore
from ..documents.collections import COLLECTION_DROPDOWN_DATA
from ..schemas.dropdowns import DropdownItem, DropdownItemCreate, DropdownType

logger = structlog.get_logger(__name__)


def add_item(store: DocumentStore, item: DropdownItemCreate) -> DropdownItem:
    value = item.value.strip()
    item_id = store.add(COLLECTION_DROPDOWN_DATA, {"type": item.type, "value": value})
    logger.info("dropdown_item_added", item_id=item_id, type=item.type)
    return DropdownItem(id=item_id, type=item.type, value=value)


def list_items(store: DocumentStore, item_type: Optional[DropdownType] = None) -> List[DropdownItem]:
    if item_type:
        docs = store.query(COLLECTION_DROPDOWN_DATA, filters=[("type", item_type)])
    else:
        docs = store.list(COLLECTION_DROPDOWN_DATA)
    return [DropdownItem.model_validate(d) for d in docs]


def values(store: DocumentStore, item_type: DropdownType) -> List[str]:
    return [item.value for item in list_items(store, item_type)]


def delete_item(store: DocumentStore, item_id: str) -> str:
    store.delete(COLLECTION_DROPDOWN_DATA, item_id)
    return item_id
