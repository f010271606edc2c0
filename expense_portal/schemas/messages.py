from datetime import datetime
from typing import Optional

from .common import CamelModel


class MessageCreate(CamelModel):
    sender_id: str
    sender_name: str
    receiver_id: str
    receiver_name: str
    subject: str
    content: str
    file_url: Optional[str] = None
    file_name: Optional[str] = None


class Message(MessageCreate):
    id: Optional[str] = None
    timestamp: datetime
    read: bool = False
