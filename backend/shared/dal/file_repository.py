"""File-backed session repository storing groups and sessions as JSON."""

import asyncio
import contextlib
import json
import os
import tempfile
from pathlib import Path

import structlog

from shared.dal.models import Group, Session
from shared.dal.session_repository import SessionRepository

logger = structlog.get_logger()

_FILE_PERMISSIONS = 0o600  # owner read/write only


class FileSessionRepository(SessionRepository):
    """File-backed session repository.

    Stores all groups and sessions in a single JSON file of the form
    ``{"groups": {...}, "sessions": {...}}``. Loads into memory on first
    access and writes back on every mutation. Uses asyncio.Lock for write
    safety within a single process.

    Limitation: only supports a single writer process.
    """

    def __init__(self, file_path: str | Path) -> None:
        self._file_path = Path(file_path)
        self._groups: dict[str, Group] = {}
        self._sessions: dict[str, Session] = {}
        self._lock = asyncio.Lock()
        self._loaded = False

    async def _ensure_loaded(self) -> None:
        """Load records from file on first access."""
        async with self._lock:
            if self._loaded:
                return
            self._load_from_file()
            self._loaded = True

    def _load_from_file(self) -> None:
        """Load groups and sessions from the JSON file into memory.

        Starts with an empty store when the file does not exist yet.
        Raises on read/parse failures for an existing file to prevent
        data loss from overwriting a file we could not read.
        """
        self._groups = {}
        self._sessions = {}

        if not self._file_path.exists():
            return

        try:
            data = json.loads(self._file_path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, ValueError, OSError) as exc:
            msg = f"Failed to load sessions from {self._file_path}"
            raise OSError(msg) from exc

        if not isinstance(data, dict):
            msg = f"Expected JSON object at root in {self._file_path}"
            raise OSError(msg)

        try:
            self._groups = {gid: Group.model_validate(g) for gid, g in data.get("groups", {}).items()}
            self._sessions = {sid: Session.model_validate(s) for sid, s in data.get("sessions", {}).items()}
        except ValueError as exc:
            msg = f"Failed to parse session data from {self._file_path}"
            raise OSError(msg) from exc

        logger.debug(
            "loaded session store",
            path=str(self._file_path),
            groups=len(self._groups),
            sessions=len(self._sessions),
        )

    def _save_to_file(self) -> None:
        """Atomically write all records to the JSON file.

        Writes to a temporary file in the same directory, then renames
        into place so readers never see a partial/truncated file.
        """
        self._file_path.parent.mkdir(parents=True, exist_ok=True)
        data = {
            "groups": {gid: g.model_dump(mode="json") for gid, g in self._groups.items()},
            "sessions": {sid: s.model_dump(mode="json") for sid, s in self._sessions.items()},
        }
        content = json.dumps(data, indent=2, ensure_ascii=False).encode("utf-8")

        fd, tmp_path = tempfile.mkstemp(
            dir=self._file_path.parent,
            prefix=".sessions_",
            suffix=".tmp",
        )
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(content)
                f.flush()
                os.fchmod(f.fileno(), _FILE_PERMISSIONS)
            Path(tmp_path).replace(self._file_path)
        except BaseException:
            with contextlib.suppress(OSError):
                Path(tmp_path).unlink()
            raise

    async def save_group(self, group: Group) -> None:
        """Insert or replace a group."""
        await self._ensure_loaded()
        async with self._lock:
            previous = self._groups.get(group.id)
            self._groups[group.id] = group
            try:
                self._save_to_file()
            except OSError:
                if previous is None:
                    del self._groups[group.id]
                else:
                    self._groups[group.id] = previous
                raise

    async def get_group(self, group_id: str) -> Group | None:
        await self._ensure_loaded()
        return self._groups.get(group_id)

    async def list_groups(self) -> list[Group]:
        """All groups, newest first."""
        await self._ensure_loaded()
        return sorted(self._groups.values(), key=lambda g: g.created_at, reverse=True)

    async def save_session(self, session: Session) -> None:
        """Insert or replace a session."""
        await self._ensure_loaded()
        async with self._lock:
            previous = self._sessions.get(session.id)
            self._sessions[session.id] = session
            try:
                self._save_to_file()
            except OSError:
                if previous is None:
                    del self._sessions[session.id]
                else:
                    self._sessions[session.id] = previous
                raise
        logger.info("saved session", session_id=session.id, rounds=len(session.rounds), status=session.status)

    async def get_session(self, session_id: str) -> Session | None:
        await self._ensure_loaded()
        return self._sessions.get(session_id)

    async def list_sessions(self, group_id: str | None = None) -> list[Session]:
        """Sessions in date order, optionally restricted to one group."""
        await self._ensure_loaded()
        sessions = [s for s in self._sessions.values() if group_id is None or s.group_id == group_id]
        return sorted(sessions, key=lambda s: s.date)

    async def delete_session(self, session_id: str) -> bool:
        """Remove a session. Returns False if it did not exist."""
        await self._ensure_loaded()
        async with self._lock:
            removed = self._sessions.pop(session_id, None)
            if removed is None:
                return False
            try:
                self._save_to_file()
            except OSError:
                self._sessions[session_id] = removed
                raise
        return True
