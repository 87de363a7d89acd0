"""Data access layer: repository interfaces and shared persistence models."""

from shared.dal.file_repository import FileSessionRepository
from shared.dal.models import Group, Round, Session
from shared.dal.session_repository import SessionRepository

__all__ = [
    "FileSessionRepository",
    "Group",
    "Round",
    "Session",
    "SessionRepository",
]
