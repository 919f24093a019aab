"""
Process-wide map of rooms to the session running in them.

The registry is the only structure shared between sessions. A session's game state is never stored here:
the outside world can reach a session only through the sender ends of its queues (the SessionHandle).
"""

import asyncio
import logging
import threading
from dataclasses import dataclass, field

from src.core.exceptions import RegistryError
from src.core.models import RoomId, Signal
from src.core.shared_types import GameAction

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class SessionHandle:
    """Capability to talk to a running session: its cancellation channel and its signal inbox."""

    room: RoomId
    cancel: asyncio.Queue[GameAction] = field(default_factory=asyncio.Queue)
    signals: asyncio.Queue[Signal] = field(default_factory=asyncio.Queue)

    def force_end(self) -> None:
        self.cancel.put_nowait(GameAction.FORCE_END)

    def deliver(self, signal: Signal) -> None:
        self.signals.put_nowait(signal)


class SessionRegistry:
    """At most one SessionHandle per room. Every operation is atomic."""

    def __init__(self) -> None:
        self._sessions: dict[RoomId, SessionHandle] = {}
        self._lock = threading.Lock()

    def try_reserve(self, room: RoomId) -> SessionHandle | None:
        """Register a fresh handle for `room` if it is free. Returns None (and changes nothing) otherwise."""
        with self._lock:
            if room in self._sessions:
                return None
            handle = SessionHandle(room)
            self._sessions[room] = handle
        logger.debug("Reserved room %s", room)
        return handle

    def release(self, room: RoomId, handle: SessionHandle | None = None) -> None:
        """
        Remove the registration of a room. Releasing a free room is a no-op.

        ---
        When `handle` is given, the room must be held by that very handle (or be free already).
        Any other handle means the registry no longer matches the sessions that run, and RegistryError is raised.
        """
        with self._lock:
            current = self._sessions.get(room)
            if current is None:
                return
            if handle is not None and current is not handle:
                raise RegistryError(
                    f"Room {room} is held by another session than the one releasing it."
                )
            del self._sessions[room]
        logger.debug("Released room %s", room)

    def handle_for(self, room: RoomId) -> SessionHandle | None:
        with self._lock:
            return self._sessions.get(room)

    def rooms(self) -> list[RoomId]:
        with self._lock:
            return list(self._sessions)

    def __contains__(self, room: object) -> bool:
        with self._lock:
            return room in self._sessions

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)
