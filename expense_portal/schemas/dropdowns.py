from typing import Literal, Optional

from .common import CamelModel

DropdownType = Literal["company", "client", "candidate", "sector"]


class DropdownItemCreate(CamelModel):
    type: DropdownType
    value: str


class DropdownItem(DropdownItemCreate):
    id: Optional[str] = None
