"""CRUD operation singletons for the session store."""

from audit_assistant.boundary.db.CRUD.base_crud import BaseCRUD
from audit_assistant.boundary.db.CRUD.message_crud import MessageCRUD, message_crud
from audit_assistant.boundary.db.CRUD.session_crud import (
    SessionCRUD,
    SessionWithCount,
    session_crud,
)

__all__ = [
    "BaseCRUD",
    "MessageCRUD",
    "SessionCRUD",
    "SessionWithCount",
    "message_crud",
    "session_crud",
]
