import logging

from fastapi import FastAPI, HTTPException, Depends, status
from fastapi.responses import Response

from ..config import settings
from .dependencies import get_chat_service
from ..services.chat import ChatService
from ..services.exceptions import EngineContractError, RunBusyError, SessionNotFoundError
from .schemas import (
    CreateSessionResponse,
    UserMessage,
    RunResponse,
    SessionRead,
)

logging.basicConfig(level=settings.LOG_LEVEL)

app = FastAPI(title="Script Chat Sessions")

# --- Endpoints ---

@app.post(
    "/sessions",
    response_model=CreateSessionResponse,
    status_code=status.HTTP_201_CREATED
)
def create_session(
    service: ChatService = Depends(get_chat_service)
):
    """Starts a new empty session."""
    session_id, _ = service.create_session()
    return CreateSessionResponse(session_id=session_id)


@app.get("/sessions/{session_id}", response_model=SessionRead)
async def get_session(
    session_id: str,
    service: ChatService = Depends(get_chat_service)
):
    """
    Returns the archived runs and the active run, read-only.
    Runs on the event loop so it never reads a run while update() folds into it.
    """
    session = service.get_session(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Session not found")

    return SessionRead(
        session_id=session_id,
        tool_path=session.tool_path,
        status=session.status,
        history=session.history,
        active=session.active,
        contract_violation=session.contract_violation,
    )


@app.delete("/sessions/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_session(
    session_id: str,
    service: ChatService = Depends(get_chat_service)
):
    if not service.delete_session(session_id):
        raise HTTPException(status_code=404, detail="Session not found")

    # For 204, we must explicitly return a Response object with no content
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@app.post("/sessions/{session_id}/runs", response_model=RunResponse)
async def submit_run(
    session_id: str,
    message: UserMessage,
    service: ChatService = Depends(get_chat_service)
):
    """Submits input and drives the run until it concludes."""
    try:
        turn_result = await service.process_message(session_id, message.text)
    except SessionNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except RunBusyError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except EngineContractError as e:
        # Not a failed run: the engine itself misbehaved
        raise HTTPException(status_code=502, detail=f"engine contract violation: {e}")

    return RunResponse(
        status=turn_result.status,
        output=turn_result.output,
        error=turn_result.error or None,
        call_count=turn_result.call_count,
    )
