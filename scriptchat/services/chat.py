"""
Chat Service - Application Orchestration Layer

This service is the entry point for conversation operations coming from an
outer surface (the HTTP API). It looks sessions up in the repository, drives
one run to its conclusion through the session's step loop, and reports the
outcome.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from ..execution.session import SessionModel, drive
from ..repositories.session import SessionRepository
from ..state.models import RunStatus
from .exceptions import RunBusyError, SessionNotFoundError

logger = logging.getLogger(__name__)


@dataclass
class TurnResult:
    status: RunStatus
    output: str
    error: str
    call_count: int


class ChatService:
    def __init__(self, session_repository: SessionRepository):
        self.session_repo = session_repository

    def create_session(self) -> tuple[str, SessionModel]:
        """Creates a new empty session."""
        return self.session_repo.create()

    def get_session(self, session_id: str) -> Optional[SessionModel]:
        return self.session_repo.get(session_id)

    def delete_session(self, session_id: str) -> bool:
        return self.session_repo.delete(session_id)

    async def process_message(self, session_id: str, user_text: str) -> TurnResult:
        """
        Runs one turn: submit the input, then fold envelopes until the run
        concludes. Run failures are reported in the result, not raised.
        """
        session = self.session_repo.get(session_id)
        if session is None:
            raise SessionNotFoundError(f"Session {session_id} not found")

        # Checked up front so a rejected turn does not touch the active run
        if session.busy:
            raise RunBusyError()

        run = await drive(session, user_text)
        logger.info(f"Turn for session {session_id} ended with {run.status.value}")

        return TurnResult(
            status=run.status,
            output=run.output,
            error=run.error_text,
            call_count=len(run.calls),
        )
