from __future__ import annotations

import threading
import uuid
from typing import Any, Dict, Optional

from ...engine.game import Game


class GameSession:
    """One game plus the lock that serializes access to it.

    Use as a context manager: ``with session as game: ...`` holds the lock
    for the duration of the block.
    """

    def __init__(self, game: Game) -> None:
        self.game = game
        self._lock = threading.Lock()

    def __enter__(self) -> Game:
        self._lock.acquire()
        return self.game

    def __exit__(self, *exc_info: Any) -> None:
        self._lock.release()


class InMemorySessionStore:
    """Thread-safe in-memory game session store.

    Responsibilities:
    - Create new sessions with unique `game_id`s
    - Hand out sessions by `game_id` (each guarded by its own lock)
    - Delete sessions
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._sessions: Dict[str, GameSession] = {}

    def create(self, game: Optional[Game] = None) -> str:
        """Create a new game session and return its `game_id`."""
        gid = str(uuid.uuid4())
        session = GameSession(game if game is not None else Game.new())
        with self._lock:
            self._sessions[gid] = session
        return gid

    def session(self, game_id: str) -> GameSession:
        """Return the session for `game_id`.

        Raises:
            KeyError: If no such session exists.
        """
        with self._lock:
            return self._sessions[game_id]

    def delete(self, game_id: str) -> bool:
        with self._lock:
            return self._sessions.pop(game_id, None) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)
