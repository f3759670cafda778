"""Database configuration and models."""

from .session import engine, async_session_factory, build_engine, init_db, close_db, get_session
from .models import FlowModel, ExecutionModel, ExecutionLogEntryModel, ContactModel

__all__ = [
    "engine",
    "async_session_factory",
    "build_engine",
    "init_db",
    "close_db",
    "get_session",
    "FlowModel",
    "ExecutionModel",
    "ExecutionLogEntryModel",
    "ContactModel",
]
