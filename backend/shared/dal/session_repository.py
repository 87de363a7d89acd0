"""Abstract interface for group and session persistence."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from shared.dal.models import Group, Session


class SessionRepository(ABC):
    """Abstract interface for group and session persistence.

    The scoring engine never talks to a repository: callers load plain
    records here, hand them to the engine, and store results afterwards.
    """

    @abstractmethod
    async def save_group(self, group: Group) -> None: ...

    @abstractmethod
    async def get_group(self, group_id: str) -> Group | None: ...

    @abstractmethod
    async def list_groups(self) -> list[Group]: ...

    @abstractmethod
    async def save_session(self, session: Session) -> None: ...

    @abstractmethod
    async def get_session(self, session_id: str) -> Session | None: ...

    @abstractmethod
    async def list_sessions(self, group_id: str | None = None) -> list[Session]: ...

    @abstractmethod
    async def delete_session(self, session_id: str) -> bool: ...
