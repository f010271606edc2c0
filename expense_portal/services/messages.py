"""
Admin-to-employee messaging over the ``messages`` collection.
"""
from datetime import datetime, timezone
from typing import List

import structlog

from ..documents import (
    DataAccessError,
    DocumentStore,
    MissingIndexError,
    PermissionDeniedError,
    ServiceUnavailableError,
)
from ..documents.collections import COLLECTION_MESSAGES
from ..schemas.messages import Message, MessageCreate

logger = structlog.get_logger(__name__)


def send_message(store: DocumentStore, message: MessageCreate) -> Message:
    data = {**message.to_document(), "timestamp": datetime.now(timezone.utc), "read": False}
    message_id = store.add(COLLECTION_MESSAGES, data)
    logger.info("message_sent", message_id=message_id, receiver_id=message.receiver_id)
    return Message.model_validate({"id": message_id, **data})


def get_user_messages(store: DocumentStore, user_id: str) -> List[Message]:
    """Inbox of ``user_id``, newest first."""
    docs = store.query(
        COLLECTION_MESSAGES,
        filters=[("receiverId", user_id)],
        order_by="timestamp",
        descending=True,
    )
    return [Message.model_validate(d) for d in docs]


def get_all_messages(store: DocumentStore) -> List[Message]:
    return [Message.model_validate(d) for d in store.list(COLLECTION_MESSAGES)]


def get_admin_messages(store: DocumentStore, admin_id: str) -> List[Message]:
    """
    Messages sent by ``admin_id``, newest first.

    Store failures are rewritten into messages fit for the sent-items screen.
    A missing composite index is passed through untouched so callers can tell
    the admin to deploy it.
    """
    try:
        docs = store.query(
            COLLECTION_MESSAGES,
            filters=[("senderId", admin_id)],
            order_by="timestamp",
            descending=True,
        )
    except MissingIndexError:
        raise
    except PermissionDeniedError as e:
        raise PermissionDeniedError("Permission denied: You do not have access to view message history") from e
    except ServiceUnavailableError as e:
        raise ServiceUnavailableError("Service unavailable: Please try again later") from e
    except DataAccessError as e:
        raise DataAccessError(f"Failed to load message history: {e.message or 'Unknown error'}") from e
    logger.debug("admin_messages_loaded", admin_id=admin_id, count=len(docs))
    return [Message.model_validate(d) for d in docs]


def mark_message_as_read(store: DocumentStore, message_id: str) -> str:
    # Setting read=True again is harmless
    store.update(COLLECTION_MESSAGES, message_id, {"read": True})
    return message_id


def delete_message(store: DocumentStore, message_id: str) -> str:
    store.delete(COLLECTION_MESSAGES, message_id)
    logger.info("message_deleted", message_id=message_id)
    return message_id
