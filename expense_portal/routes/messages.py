from typing import List

from fastapi import APIRouter, Depends

from ..documents import DocumentStore
from ..schemas.messages import Message, MessageCreate
from ..services import messages
from .deps import get_store

router = APIRouter(prefix="/api/messages", tags=["messages"])


@router.post("", response_model=Message, status_code=201)
def send_message(body: MessageCreate, store: DocumentStore = Depends(get_store)):
    return messages.send_message(store, body)


@router.get("", response_model=List[Message])
def list_messages(store: DocumentStore = Depends(get_store)):
    return messages.get_all_messages(store)


@router.get("/inbox/{user_id}", response_model=List[Message])
def inbox(user_id: str, store: DocumentStore = Depends(get_store)):
    return messages.get_user_messages(store, user_id)


@router.get("/sent/{admin_id}", response_model=List[Message])
def sent(admin_id: str, store: DocumentStore = Depends(get_store)):
    return messages.get_admin_messages(store, admin_id)


@router.post("/{message_id}/read")
def mark_read(message_id: str, store: DocumentStore = Depends(get_store)):
    return {"id": messages.mark_message_as_read(store, message_id), "read": True}


@router.delete("/{message_id}")
def delete_message(message_id: str, store: DocumentStore = Depends(get_store)):
    return {"id": messages.delete_message(store, message_id)}
