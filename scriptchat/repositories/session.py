import uuid
from abc import ABC, abstractmethod
from typing import Callable, Dict, Optional

from ..execution.session import SessionModel


class SessionRepository(ABC):
    """
    Defines how the application accesses sessions.
    Sessions live only as long as the process; there is no persistence.
    """

    @abstractmethod
    def create(self) -> tuple[str, SessionModel]:
        """Creates a new session with a unique ID."""
        pass

    @abstractmethod
    def get(self, session_id: str) -> Optional[SessionModel]:
        """Retrieves a session by ID."""
        pass

    @abstractmethod
    def delete(self, session_id: str) -> bool:
        """Deletes a session. Returns True if found and deleted."""
        pass


class InMemorySessionRepository(SessionRepository):
    """
    Uses an in-memory dictionary for session storage.
    """

    def __init__(self, factory: Callable[[], SessionModel]):
        self._factory = factory
        self._store: Dict[str, SessionModel] = {}

    def create(self) -> tuple[str, SessionModel]:
        new_id = str(uuid.uuid4())
        session = self._factory()
        self._store[new_id] = session
        return new_id, session

    def get(self, session_id: str) -> Optional[SessionModel]:
        return self._store.get(session_id)

    def delete(self, session_id: str) -> bool:
        if session_id in self._store:
            del self._store[session_id]
            return True
        return False
